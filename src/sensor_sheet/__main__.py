"""Allow ``python -m sensor_sheet``."""

from sensor_sheet import cli

if __name__ == "__main__":
    cli.app()
