# promptmanager/main.py
"""GUI entry point: ``python -m promptmanager.main`` or the ``promptmanager-gui`` script."""
import os
import sys

if __package__ in (None, "") and not getattr(sys, "frozen", False):
    # Executed as a file: make the project root importable
    sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.realpath(__file__))))

from promptmanager.config.loader import get_config
from promptmanager.services.logging import setup_logging
from promptmanager.ui.application import run

def main() -> int:
    config = get_config()
    setup_logging(level=config.log_level)
    return run(sys.argv)

if __name__ == "__main__":
    sys.exit(main())
