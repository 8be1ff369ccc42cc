"""Custom exceptions for ZipServe application"""


class ZipServeError(Exception):
    """Base exception for ZipServe application.

    The message is what the client sees in the 500 response body.
    """

    pass


class ConfigurationError(ZipServeError):
    """Configuration-related errors"""

    pass


class InvalidInputError(ZipServeError):
    """Malformed entry reference in a /zip request"""

    pass


class NotFoundError(ZipServeError):
    """Resolved archive source does not exist or cannot be stat'ed"""

    pass


class UnsupportedEntryTypeError(ZipServeError):
    """Archive source is neither a regular file nor a directory"""

    pass


class DirectoryReadError(ZipServeError):
    """Served root could not be listed"""

    pass


class StreamWriteError(ZipServeError):
    """The response sink went away while the archive was being written"""

    pass
