"""Demonstration HTTP greeter with graceful shutdown and synthetic log traffic."""

from .handler import GreetingHandler, format_greeting, resolve_name
from .lifecycle import Lifecycle
from .server import DrainTimeout, GreeterHTTPServer

__version__ = "0.1.0"
