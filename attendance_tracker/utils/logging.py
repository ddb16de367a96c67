import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO", log_file: str = "") -> None:
    handlers = [
        # Log to console
        logging.StreamHandler(sys.stdout),
    ]
    if log_file:
        # Log to file
        handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))

    # force: a later app may bring a different level or file
    logging.basicConfig(
        level=level.upper(), format=LOG_FORMAT, handlers=handlers, force=True
    )


def get_logger(name: str):
    return logging.getLogger(name)
