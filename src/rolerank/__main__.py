"""Entry point for 'python -m rolerank' command."""

from rolerank.cli import main

if __name__ == "__main__":
    main()
