"""Error types raised while querying and parsing licence server output."""


class LicenceQueryError(Exception):
    """Base class for failures that prevent a licence refresh."""


class ConnectivityError(LicenceQueryError):
    """The licence server could not be reached.

    Raised when the raw output contains a known host-unreachable or timeout
    marker. A parse that raises this publishes nothing.
    """

    def __init__(self, message: str, phrase: str = ""):
        super().__init__(message)
        self.message = message
        self.phrase = phrase


class QueryToolError(LicenceQueryError):
    """The external query executable is missing or could not be started."""


class MalformedLineError(ValueError):
    """A structural line whose fields could not be extracted.

    Always handled inside the parse loop: the line is skipped.
    """
