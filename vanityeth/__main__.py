"""Entry point for python -m vanityeth."""

import sys


def main():
    from vanityeth.cli import main as cli_main
    sys.exit(cli_main())


if __name__ == "__main__":
    main()
