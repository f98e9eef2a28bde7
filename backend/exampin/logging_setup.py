import logging
from typing import Optional


def setup_logging(level: Optional[str] = None) -> None:
    """Configure a single console handler for the service. Unknown level names fall back to INFO."""
    level_value = getattr(logging, (level or "INFO").upper(), logging.INFO)
    if not isinstance(level_value, int):
        level_value = logging.INFO

    logging.basicConfig(
        level=level_value,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
