"""Allow ``python -m swixter``."""

from swixter.cli.cli import main

if __name__ == "__main__":
    main()
