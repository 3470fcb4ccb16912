import signal
import threading

from .config import HOST, PERIODIC_LOGS, PORT, SHUTDOWN_TIMEOUT
from .emitter import SyntheticLogEmitter
from .handler import GreetingHandler
from .logs import fatal, log
from .server import DrainTimeout, GreeterHTTPServer

IDLE = "idle"
SERVING = "serving"
DRAINING = "draining"
STOPPED = "stopped"

STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class Lifecycle:
    """Owns the listener and the emitter: idle -> serving -> draining -> stopped."""

    def __init__(self, host=HOST, port=PORT, handler_class=GreetingHandler,
                 drain_timeout=SHUTDOWN_TIMEOUT, emitter=None):
        self.host = host
        self.requested_port = port
        self.handler_class = handler_class
        self.drain_timeout = drain_timeout
        self.emitter = emitter
        self.state = IDLE
        self.server = None
        self._serve_thread = None
        self._stop_requested = threading.Event()

    @property
    def port(self):
        if self.server is None:
            return self.requested_port
        return self.server.server_address[1]

    def start(self):
        try:
            self.server = GreeterHTTPServer((self.host, self.requested_port), self.handler_class)
        except OSError as e:
            fatal(f"HTTP ListenAndServe error: {e}")

        log(f"Starting HTTP Greeter on port {self.port}")
        self._serve_thread = threading.Thread(target=self._serve, daemon=True, name="http_serve")
        self._serve_thread.start()
        self.state = SERVING

    def _serve(self):
        self.server.serve_forever()
        log("HTTP server stopped serving new requests.")

    def install_signal_handlers(self):
        previous = {}
        for signum in STOP_SIGNALS:
            previous[signum] = signal.signal(signum, self._on_signal)
        return previous

    def _on_signal(self, signum, frame):
        self.request_stop()

    def request_stop(self):
        self._stop_requested.set()

    def wait(self):
        # timed wait keeps the main thread responsive to signals
        while not self._stop_requested.wait(0.5):
            pass

    def stop(self):
        if self.state != SERVING:
            raise RuntimeError(f"cannot stop a server that is {self.state}")
        self.state = DRAINING
        log("Shutting down the server...")
        try:
            self.server.drain(self.drain_timeout)
        except DrainTimeout as e:
            fatal(f"HTTP shutdown error: {e}")
        self._serve_thread.join()
        self.state = STOPPED
        log("Shutdown complete.")

    def run(self):
        if self.emitter is None and PERIODIC_LOGS:
            self.emitter = SyntheticLogEmitter()
        if self.emitter is not None:
            self.emitter.start()

        self.install_signal_handlers()
        self.start()
        self.wait()

        if self.emitter is not None:
            self.emitter.stop()
        self.stop()
