"""Entry point for `python -m photoflow`."""

import sys


def main():
    from photoflow.app import run_app
    sys.exit(run_app())


if __name__ == "__main__":
    main()
