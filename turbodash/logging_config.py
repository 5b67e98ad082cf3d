import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach one stream handler to the ``turbodash`` logger.

    Calling this again only updates the level.
    """
    logger = logging.getLogger("turbodash")
    logger.setLevel(level.upper())

    if not any(getattr(h, "_turbodash", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._turbodash = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
