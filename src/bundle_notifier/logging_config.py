from __future__ import annotations

import logging

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    resolved = getattr(logging, str(level).upper(), None)
    if not isinstance(resolved, int):
        resolved = logging.INFO

    logging.basicConfig(level=resolved, format=_FORMAT, force=True)
    # discord.py logs every gateway event at DEBUG.
    if resolved < logging.INFO:
        logging.getLogger("discord").setLevel(logging.INFO)
