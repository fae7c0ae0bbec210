"""Exception taxonomy for document conversion errors.

Distinguishes between user-correctable input errors (reported verbatim) and
everything else, which is treated as a server-side defect.
"""


class ConversionError(Exception):
    """Base class for errors the caller can fix by supplying a different file."""

    pass


class UnsupportedFormatError(ConversionError):
    """The declared file name has an extension no extractor handles."""

    pass


class ArchiveFormatError(ConversionError):
    """The uploaded ZIP container is malformed.

    ``reason`` is one of the fixed sub-reasons below; ``str(error)`` is the reason.
    """

    MISSING_DIRECTORY = "missing directory"
    CORRUPT_ENTRY = "corrupt entry"
    BAD_LOCAL_HEADER = "bad local header"
    UNEXPECTED_SIZE = "unexpected size"
    UNSUPPORTED_METHOD = "unsupported method"
    ENTRY_NOT_FOUND = "entry not found"

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class RewriteError(Exception):
    """The optional remote rewriting call failed. Never escapes the pipeline."""

    pass

