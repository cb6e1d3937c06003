"""Logging configuration for lclipsync CLI."""
import logging


def configure_logging(verbose: bool) -> None:
    """Configure logging level based on verbosity setting.

    Args:
        verbose: If True, set DEBUG level; otherwise INFO level.

    Connection, discovery and sync activity is logged at INFO so a
    running device shows what it syncs. The websockets library is kept
    at WARNING unless verbose.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[logging.StreamHandler()],
    )
    if not verbose:
        logging.getLogger("websockets").setLevel(logging.WARNING)
