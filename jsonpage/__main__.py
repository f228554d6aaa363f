from jsonpage.cli import main

main()
