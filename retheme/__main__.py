"""Entry point for `python -m retheme`."""

import sys


def main():
    from retheme.app import main as run_cli
    sys.exit(run_cli())


if __name__ == "__main__":
    main()
