"""Entry point for ``python -m blogops``."""

from blogops.cli import run

if __name__ == "__main__":
    run()
