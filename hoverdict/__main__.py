"""Allow ``python -m hoverdict``."""

from hoverdict.cli.main import main

if __name__ == "__main__":
    main()
