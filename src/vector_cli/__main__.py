from vector_cli.cli import main

main()
