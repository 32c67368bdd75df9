from cpush.cli.main import run

run()
