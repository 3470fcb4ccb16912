import http.server
import socket
import socketserver
import threading


class DrainTimeout(RuntimeError):
    pass


class GreeterHTTPServer(socketserver.ThreadingMixIn, http.server.HTTPServer):
    """HTTPServer with one thread per connection and a bounded drain.

    Open connections are tracked so that shutdown can stop accepting,
    close idle keep-alive connections and wait for the rest.
    """
    daemon_threads = True

    def __init__(self, server_address, handler_class):
        super().__init__(server_address, handler_class)
        self.draining = False
        self._cond = threading.Condition()
        self._open = set()
        self._idle = set()

    @property
    def active_connections(self):
        with self._cond:
            return len(self._open)

    # --------------------------- connection bookkeeping
    def process_request(self, request, client_address):
        with self._cond:
            self._open.add(request)
        try:
            super().process_request(request, client_address)
        except Exception:
            self._forget(request)
            raise

    def process_request_thread(self, request, client_address):
        try:
            super().process_request_thread(request, client_address)
        finally:
            self._forget(request)

    def _forget(self, request):
        with self._cond:
            self._open.discard(request)
            self._idle.discard(request)
            self._cond.notify_all()

    def connection_idle(self, conn):
        """Mark a connection as waiting for its next request.

        Returns False once draining has started; the handler then closes it.
        """
        with self._cond:
            if self.draining:
                return False
            self._idle.add(conn)
            return True

    def connection_busy(self, conn):
        with self._cond:
            self._idle.discard(conn)

    # --------------------------- drain
    def drain(self, timeout):
        # stop accepting, then refuse at the socket level
        self.shutdown()
        self.server_close()

        with self._cond:
            self.draining = True
            for conn in self._idle:
                try:
                    conn.shutdown(socket.SHUT_RD)
                except OSError:
                    # peer already gone
                    continue
            if not self._cond.wait_for(lambda: not self._open, timeout):
                raise DrainTimeout(
                    f"{len(self._open)} connection(s) still open after {timeout}s"
                )
