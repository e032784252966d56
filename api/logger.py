import logging
import sys
from contextvars import ContextVar

from config import get_settings

# Request id of the HTTP call being served; "-" outside of a request.
request_context: ContextVar[str] = ContextVar("request_id", default="-")


class RequestFilter(logging.Filter):
    """Injects the current request id into every log record."""

    def filter(self, record):
        record.request_id = request_context.get()
        return True


def setup_logger():
    logger = logging.getLogger("endo_referral")
    logger.setLevel(get_settings().log_level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(
            "[%(asctime)s] [%(levelname)s] [%(request_id)s] %(message)s",
            datefmt="%H:%M:%S",
        ))
        handler.addFilter(RequestFilter())
        logger.addHandler(handler)

    return logger


logger = setup_logger()
