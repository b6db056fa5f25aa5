import logging
from collections import deque

LOG_FORMAT = '%(levelname)s - %(message)s'


def setup_logging(level="INFO"):
    """Configure root logging for scripts. Library modules only create loggers."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)


class MessageLog:
    """
    Operator message log shown next to the scope.
    Newest entry first; the oldest are discarded beyond `capacity`.
    Every entry is also forwarded to the standard logger.
    """
    def __init__(self, capacity=500, logger=None):
        self.capacity = capacity
        self.entries = deque(maxlen=capacity)
        self.logger = logger or logging.getLogger("radarsim.log")

    def log(self, sim_time, message, level=logging.INFO):
        """
        Record one message stamped with the simulation time.

        Args:
            sim_time: Simulation time in seconds
            message: Operator-facing text (e.g. "CMD_OK: AC101 H 090")
            level: Level used when forwarding to the standard logger
        """
        entry = f"T+{sim_time:07.1f}s {message}"
        self.entries.appendleft(entry)
        self.logger.log(level, message)
        return entry

    def recent(self, n=None):
        entries = list(self.entries)
        return entries if n is None else entries[:n]

    def clear(self):
        self.entries.clear()

    def __len__(self):
        return len(self.entries)
