from fit_power.cli import main

main()
