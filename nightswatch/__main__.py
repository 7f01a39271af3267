from nightswatch.main import run

run()
