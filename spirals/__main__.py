from spirals.main import main

main()
