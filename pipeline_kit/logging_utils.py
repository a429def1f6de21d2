import logging
import sys


# google 클라이언트 라이브러리는 DEBUG 에서 너무 많은 로그를 남긴다.
_NOISY_LOGGERS = ("google", "urllib3", "google.auth")


def setup_logging(verbosity: int = 0, quiet: bool = False) -> None:
    level = logging.INFO
    if verbosity >= 1:
        level = logging.DEBUG
    if quiet:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )

    if verbosity < 2:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
