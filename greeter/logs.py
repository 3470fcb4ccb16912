import os
import sys
import threading
import traceback
from datetime import datetime


def _stamp():
    return datetime.now().strftime("%Y/%m/%d %H:%M:%S")


def log(msg):
    print(f"{_stamp()} {msg}", flush=True)


def fatal(msg):
    """Print a diagnostic to stderr and exit with status 1."""
    print(f"{_stamp()} {msg}", file=sys.stderr, flush=True)
    raise SystemExit(1)


# --- Ensure uncaught thread exceptions crash the whole process ---
def _thread_excepthook(args):
    # args has: exc_type, exc_value, exc_traceback, thread
    print(f"Uncaught exception in thread {args.thread.name}:", file=sys.stderr)
    traceback.print_exception(args.exc_type, args.exc_value, args.exc_traceback, file=sys.stderr)
    os._exit(1)


def install_thread_excepthook():
    threading.excepthook = _thread_excepthook
