from src.bookstore.cli import main

main()
