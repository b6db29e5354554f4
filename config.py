"""Global settings for the Banker's Algorithm safety checker."""

DEFAULT_INPUT_FILE = "bank.dat"  # read when no input path is given

PROCESS_LABEL = "P"
SEQUENCE_SEPARATOR = " -> "

EXIT_SAFE = 0
EXIT_UNSAFE = 1
EXIT_INPUT_ERROR = 2
