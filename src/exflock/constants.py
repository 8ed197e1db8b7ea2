"""Constants for exflock CLI."""

# Launcher exit codes
EXIT_OK = 0
EXIT_USAGE = 1  # bad arguments or acquisition timed out
EXIT_MAILBOX = 2
EXIT_PLATFORM = 3

# Holder exit codes (one per malformed argument)
EXIT_HOLDER_ARG_COUNT = 10
EXIT_HOLDER_REQUESTER = 11
EXIT_HOLDER_LIFETIME = 12
EXIT_HOLDER_MAILBOX = 13
EXIT_HOLDER_ROLE = 14

HOLDER_ARG_COUNT = 3

# signal.alarm() takes an unsigned int
MAX_LIFETIME = 2**31 - 1

# Timings (seconds)
DEFAULT_LIFETIME = 45
DEFAULT_POLL_INTERVAL = 1.0
WATCHDOG_GRACE = 30
RELEASE_WAIT_TIMEOUT = 5
