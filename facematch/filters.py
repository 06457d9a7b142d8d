# facematch/filters.py
import logging


class AsciiOnlyFilter(logging.Filter):
    """Escape non-ASCII characters so log files stay readable on any console."""
    def filter(self, record: logging.LogRecord) -> bool:
        msg = record.getMessage()
        if not msg.isascii():
            record.msg = msg.encode("ascii", "backslashreplace").decode("ascii")
            record.args = None
        return True


class ErrorLevelFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


class InfoAndAboveFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.INFO
