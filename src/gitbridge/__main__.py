"""Module entry point for `python -m gitbridge`."""

from gitbridge.cli.main import main

if __name__ == "__main__":
    main()
