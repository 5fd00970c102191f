from keysplit.cli import main

main()
