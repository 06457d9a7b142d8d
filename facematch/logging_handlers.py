# facematch/logging_handlers.py
import os
import time
from logging.handlers import BaseRotatingHandler


class SizeAndTimeRotatingFileHandler(BaseRotatingHandler):
    """
    Rotates when the file grows past `max_bytes` or is older than `days`.
    Keeps `backup_count` old files as name.1 .. name.N (name.1 is newest).
    """
    def __init__(self, filename, mode="a", max_bytes=10 * 1024 * 1024, days=3,
                 backup_count=None, encoding="utf-8", delay=False):
        self.max_bytes = int(max_bytes)
        self.max_age = float(days) * 86400
        self.backup_count = int(backup_count if backup_count is not None else days)
        self.opened_at = None
        directory = os.path.dirname(os.path.abspath(filename))
        os.makedirs(directory, exist_ok=True)
        super().__init__(filename, mode, encoding, delay)
        self._stamp()

    def _stamp(self):
        try:
            self.opened_at = os.path.getctime(self.baseFilename)
        except OSError:
            self.opened_at = time.time()

    def shouldRollover(self, record):
        if self.stream is None:
            self.stream = self._open()
        if self.max_bytes > 0:
            msg = f"{self.format(record)}\n"
            self.stream.seek(0, os.SEEK_END)
            if self.stream.tell() + len(msg) > self.max_bytes and self.stream.tell() > 0:
                return True
        return self.max_age > 0 and (time.time() - self.opened_at) >= self.max_age

    def doRollover(self):
        if self.stream:
            self.stream.close()
            self.stream = None

        if self.backup_count > 0:
            for i in range(self.backup_count - 1, 0, -1):
                src = f"{self.baseFilename}.{i}"
                dst = f"{self.baseFilename}.{i + 1}"
                if os.path.exists(src):
                    os.replace(src, dst)
            if os.path.exists(self.baseFilename):
                os.replace(self.baseFilename, f"{self.baseFilename}.1")
        elif os.path.exists(self.baseFilename):
            os.remove(self.baseFilename)

        self.stream = self._open()
        self.opened_at = time.time()
