"""Protean Engine runner for the Requisitions domain.

Processes events asynchronously when the domain runs with
``event_processing = "async"`` (the production overlay), keeping the
requisition summary projection up to date.

Usage:
    PROTEAN_ENV=production python src/server.py
    python src/server.py --test-mode    # Drain pending messages and exit
"""

import argparse

from protean.server.engine import Engine

from requisitions.domain import requisitions
from requisitions.utils.logging import configure_logging


def main():
    parser = argparse.ArgumentParser(description="Storeroom Engine runner")
    parser.add_argument(
        "--test-mode",
        action="store_true",
        help="Process pending messages once and exit",
    )
    args = parser.parse_args()

    configure_logging()
    requisitions.init()

    engine = Engine(requisitions, test_mode=args.test_mode)
    engine.run()


if __name__ == "__main__":
    main()
