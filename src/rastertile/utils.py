"""Logging and console helpers."""
import logging
import sys

from . import config


def vprint(text, level=0):
    """Print text if verbose mode is enabled.

    Parameters
    ----------
    text : str
        Text to print.
    level : int, optional
        Indentation level, by default 0.
    """
    if config.get("verbose"):
        print("  " * level + str(text))


def setup_logging(level=None):
    """Configure the root logger once, for the CLI and the server."""
    root = logging.getLogger()
    if root.handlers:
        return
    level_name = str(level or config.get("log_level")).upper()
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
