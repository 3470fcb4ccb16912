"""Fire simultaneous greetings with distinct names and check for cross-talk.

    python -m greeter.loadcheck [url] [count]
"""
import sys
import threading

import requests

from .handler import format_greeting

URL = "http://localhost:9090/greeter/greet"
COUNT = 50
TIMEOUT = 5  # seconds


def check_request(url, name, stats, lock, timeout=TIMEOUT):
    try:
        r = requests.get(url, params={"name": name}, timeout=timeout)
        outcome = "success" if r.status_code == 200 and r.text == format_greeting(name) else "mismatch"
    except requests.RequestException:
        outcome = "failed"

    with lock:
        stats["total"] += 1
        stats[outcome] += 1


def run(url=URL, count=COUNT, timeout=TIMEOUT):
    stats = {"success": 0, "mismatch": 0, "failed": 0, "total": 0}
    lock = threading.Lock()
    start = threading.Barrier(count)

    def worker(i):
        # release every request at once
        start.wait()
        check_request(url, f"caller-{i}", stats, lock, timeout)

    threads = [threading.Thread(target=worker, args=(i,), daemon=True) for i in range(count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return stats


def print_stats(url, stats):
    total = stats["total"]
    rate = stats["success"] / total if total else 0.0
    print(f"\n---- {url} ----")
    print(f"Success rate: {rate:.2%}")
    print(f"Success: {stats['success']}")
    print(f"Mismatch: {stats['mismatch']}")
    print(f"Failed: {stats['failed']}")
    print(f"Total: {total}")
    print("--------------------------\n")


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    url = argv[0] if argv else URL
    count = int(argv[1]) if len(argv) > 1 else COUNT

    print(f"Sending {count} simultaneous greetings to {url}...")
    stats = run(url, count)
    print_stats(url, stats)
    return 0 if stats["success"] == stats["total"] else 1


if __name__ == "__main__":
    sys.exit(main())
