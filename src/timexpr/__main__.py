from timexpr.cli import main

main()
