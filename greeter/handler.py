import http.server
import urllib.parse

from .config import DEFAULT_NAME, GREET_PATH
from .logs import log

DISCARD_CHUNK = 64 * 1024
DISCARD_LIMIT = 1024 * 1024   # larger bodies are not read; the connection is closed instead

# names are carried as utf-8 with undecodable bytes kept as surrogates,
# so whatever bytes the caller sent come back in the body unchanged
NAME_ENCODING = "utf-8"
NAME_ERRORS = "surrogateescape"


def resolve_name(query):
    """First ``name`` value of a raw query string, or the placeholder."""
    values = urllib.parse.parse_qs(
        query, keep_blank_values=True, encoding=NAME_ENCODING, errors=NAME_ERRORS
    ).get("name")
    if not values or not values[0]:
        return DEFAULT_NAME
    return values[0]


def format_greeting(name):
    return f"Hello, {name}!\n"


def printable(name):
    return name.encode(NAME_ENCODING, NAME_ERRORS).decode(NAME_ENCODING, "backslashreplace")


class GreetingHandler(http.server.BaseHTTPRequestHandler):
    protocol_version = "HTTP/1.1"

    # --------------------------- connection state
    def handle_one_request(self):
        # idle until the next request line arrives
        if not self.server.connection_idle(self.connection):
            self.close_connection = True
            return
        super().handle_one_request()

    def parse_request(self):
        self.server.connection_busy(self.connection)
        return super().parse_request()

    def end_headers(self):
        if self.server.draining or self.close_connection:
            self.send_header("Connection", "close")
        super().end_headers()

    # --------------------------- request body
    def _discard_body(self):
        """Consume an ignored request body. False means a 400 was already sent."""
        if self.headers.get("Transfer-Encoding"):
            # not decoded; nothing after it can be trusted on this connection
            self.close_connection = True
            return True

        raw = self.headers.get("Content-Length")
        if raw is None:
            return True
        try:
            length = int(raw)
        except ValueError:
            length = -1
        if length < 0:
            self.send_error(400, "Bad Content-Length")
            return False

        if length > DISCARD_LIMIT:
            self.close_connection = True
            return True
        while length > 0:
            chunk = self.rfile.read(min(length, DISCARD_CHUNK))
            if not chunk:
                self.close_connection = True
                break
            length -= len(chunk)
        return True

    # --------------------------- routes
    def _route(self, with_body=True):
        if not self._discard_body():
            return

        # the request line arrives latin-1 decoded; recover the raw bytes
        target = self.path.encode("latin-1").decode(NAME_ENCODING, NAME_ERRORS)
        path, _, query = target.partition("?")
        if urllib.parse.unquote(path) == GREET_PATH:
            return self.greet(query, with_body)
        self.send_error(404)

    def do_GET(self):
        self._route()

    def do_HEAD(self):
        self._route(with_body=False)

    do_POST = do_GET
    do_PUT = do_GET
    do_DELETE = do_GET

    def greet(self, query, with_body=True):
        name = resolve_name(query)
        log(f"INFO: Greeting request received for name: {printable(name)} from {self.remote_addr}")

        body = format_greeting(name).encode(NAME_ENCODING, NAME_ERRORS)
        self.send_response(200)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if with_body:
            self.wfile.write(body)

    @property
    def remote_addr(self):
        host, port = self.client_address[:2]
        return f"{host}:{port}"

    def log_request(self, code="-", size="-"):
        # greet() writes its own line
        pass

    def log_message(self, fmt, *args):
        log(f"{self.client_address[0]} - - {fmt % args}")
