"""Shared fixtures for greeter tests.

Servers run in-process on an ephemeral port on localhost.
"""
import signal
import socket
import time

import pytest

from greeter.handler import GreetingHandler
from greeter.lifecycle import SERVING, Lifecycle

HOST = "127.0.0.1"


class SlowHandler(GreetingHandler):
    """Greets after a delay, to keep a request in flight."""
    delay = 1.0

    def greet(self, query, with_body=True):
        time.sleep(self.delay)
        super().greet(query, with_body)


def make_slow_handler(delay):
    return type("SlowHandler", (SlowHandler,), {"delay": delay})


def wait_for(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return False


def raw_request(port, data, timeout=5):
    """Send raw bytes and read until the server closes the connection."""
    chunks = []
    with socket.create_connection((HOST, port), timeout=timeout) as s:
        s.sendall(data)
        while True:
            chunk = s.recv(65536)
            if not chunk:
                break
            chunks.append(chunk)
    return b"".join(chunks)


def connection_refused(port):
    try:
        socket.create_connection((HOST, port), timeout=1).close()
    except ConnectionRefusedError:
        return True
    return False


@pytest.fixture
def lifecycle():
    """A started Lifecycle; stopped afterwards if the test left it serving."""
    lc = Lifecycle(host=HOST, port=0, drain_timeout=5)
    lc.start()
    yield lc
    if lc.state == SERVING:
        lc.stop()


@pytest.fixture
def greet_url(lifecycle):
    return f"http://{HOST}:{lifecycle.port}/greeter/greet"


@pytest.fixture
def restore_signals():
    saved = {s: signal.getsignal(s) for s in (signal.SIGINT, signal.SIGTERM)}
    yield
    for signum, handler in saved.items():
        signal.signal(signum, handler)
