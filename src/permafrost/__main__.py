"""Allow running as `python -m permafrost`."""

import permafrost.cli as cli

if __name__ == "__main__":
    cli.main()
