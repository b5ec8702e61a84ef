"""Entry point for python -m engagetrack."""

import logging

from .cli import parse_args
from .runners.headless import print_report, run_headless
from .runners.live import run_live


def main():
    """Main entry point."""
    config = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    if config.mode == "live":
        report = run_live(config)
    else:
        report = run_headless(config)
    print_report(report)


if __name__ == "__main__":
    main()
