import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level '{level}'")

    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger("chat_hub").setLevel(resolved)
