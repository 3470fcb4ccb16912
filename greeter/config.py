import os

# ================================
# Greeter Config
# ================================
HOST = "0.0.0.0"
PORT = 9090

GREET_PATH = "/greeter/greet"
DEFAULT_NAME = "Stranger"

SHUTDOWN_TIMEOUT = 10   # drain window (seconds)
LOG_INTERVAL = 30       # synthetic log tick (seconds)

# ================================
# Periodic Logs Switch
# ================================
PERIODIC_LOGS = os.getenv("GREETER_PERIODIC_LOGS", "true").lower() == "true"
# false → no synthetic log lines
