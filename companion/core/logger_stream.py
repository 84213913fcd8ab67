import asyncio
import logging
import os
import sys
from collections import deque

LOG_CAPACITY = int(os.environ.get("COMPANION_LOG_CAPACITY", 1000))


class MemoryStreamHandler(logging.Handler):
    """Keeps the most recent formatted records and fans new ones out to websocket queues."""

    def __init__(self, capacity=LOG_CAPACITY):
        super().__init__()
        self.capacity = capacity
        self.logs = deque(maxlen=capacity)
        self.listeners = set()
        self.setFormatter(logging.Formatter('%(levelname)s:\t  %(name)s: %(message)s'))

    def emit(self, record):
        try:
            msg = self.format(record)
            self.logs.append(msg)

            # Echo to the real stdout so the log still reaches the console
            try:
                print(msg, file=sys.__stdout__, flush=True)
            except (UnicodeEncodeError, ValueError):
                if hasattr(sys.__stdout__, "buffer"):
                    sys.__stdout__.buffer.write((msg + "\n").encode("utf-8", "replace"))
                    sys.__stdout__.buffer.flush()

            for queue in list(self.listeners):
                try:
                    queue.put_nowait(msg)
                except asyncio.QueueFull:
                    pass
        except Exception:
            self.handleError(record)

    def add_listener(self, queue: asyncio.Queue):
        self.listeners.add(queue)

    def remove_listener(self, queue: asyncio.Queue):
        self.listeners.discard(queue)

    def recent(self, limit=None):
        items = list(self.logs)
        if limit is not None:
            items = items[-limit:] if limit > 0 else []
        return items


stream_handler = MemoryStreamHandler()


def setup_log_capture(level=logging.INFO):
    root = logging.getLogger()
    root.setLevel(level)
    if stream_handler not in root.handlers:
        root.addHandler(stream_handler)

    # uvicorn's loggers do not propagate to root
    for name in ["uvicorn", "uvicorn.access", "fastapi"]:
        l = logging.getLogger(name)
        if stream_handler not in l.handlers:
            l.addHandler(stream_handler)
