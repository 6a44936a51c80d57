from inix.cli import main

main()
