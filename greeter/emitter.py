import random
import threading

from .config import LOG_INTERVAL
from .logs import log

SYSTEM_ERRORS = [
    "database connection timeout",
    "memory usage high",
    "disk space low",
    "network latency spike",
    "cache miss rate elevated",
]


class SyntheticLogEmitter:
    """Background ticker producing fake health, metrics, perf and error lines.

    Nothing reads what it writes; it only simulates log traffic.
    """

    def __init__(self, interval=LOG_INTERVAL, rng=None):
        self.interval = interval
        self.count = 0
        self._rng = rng or random.Random()
        self._stop = threading.Event()
        self._thread = None

    def render(self, count):
        rng = self._rng
        kind = count % 4
        if kind == 0:
            uptime = count * self.interval
            return (f"DEBUG: Periodic health check - uptime: {uptime}s, "
                    f"threads: {rng.randint(10, 59)}")
        if kind == 1:
            return (f"INFO: System metrics - requests processed: {count * rng.randrange(100) + 50}, "
                    f"memory usage: {rng.randint(60, 89)}%")
        if kind == 2:
            return (f"WARN: Performance alert - response time: {rng.randint(600, 999)}ms "
                    f"(threshold: 500ms)")
        error_type = rng.choice(SYSTEM_ERRORS)
        return (f"ERROR: System issue detected - {error_type} "
                f"(correlation_id: {rng.randint(1000, 10999)})")

    def tick(self):
        self.count += 1
        log(self.render(self.count))

    def _run(self):
        while not self._stop.wait(self.interval):
            self.tick()

    def start(self):
        self._thread = threading.Thread(target=self._run, daemon=True, name="synthetic_log_emitter")
        self._thread.start()

    def stop(self):
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
