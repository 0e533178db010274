"""bestls — a faster, prettier ``ls`` with filtering and JSON output."""

__version__ = "0.1.0"


class BestlsError(Exception):
    """User-facing CLI error.

    Raised for invalid arguments, unreadable root directories, malformed
    size bounds, and other input errors. The message is printed to stderr
    and the process exits with code 1.
    """
