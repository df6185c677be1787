import logging
import sys
import uuid

from pythonjsonlogger import jsonlogger

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LEVELS = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "critical": logging.CRITICAL,
}

FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# attributes every LogRecord has; anything else came in through ``extra``
_RESERVED = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class TextFormatter(logging.Formatter):
    """Plain text line followed by the structured fields as key=value."""

    def format(self, record):
        line = super().format(record)
        fields = [f"{key}={value}" for key, value in sorted(vars(record).items()) if key not in _RESERVED]
        if fields:
            line = f"{line} {' '.join(fields)}"
        return line


def setup_logging(level="info", json=False):
    root_logger = logging.getLogger()
    root_logger.setLevel(LEVELS[level.lower()])
    handler = logging.StreamHandler(sys.stdout)
    if json:
        handler.setFormatter(jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    else:
        handler.setFormatter(TextFormatter(FORMAT))
    for h in root_logger.handlers[:]:
        root_logger.removeHandler(h)
    root_logger.addHandler(handler)


class RequestLogger(logging.LoggerAdapter):
    """Logger bound to one scrape; every line carries its request id."""

    def __init__(self, logger, **fields):
        fields.setdefault("request_id", str(uuid.uuid4()))
        super().__init__(logger, fields)

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs

    def trace(self, msg, *args, **kwargs):
        self.log(TRACE, msg, *args, **kwargs)
