from bottlefetch.cli.app import main

main()
