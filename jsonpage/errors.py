"""Exception hierarchy for the page server."""


class JsonPageError(Exception):
    """Base error for page rendering operations."""
    pass


class DocumentNotFoundError(JsonPageError):
    """Requested document file does not exist."""
    pass


class DocumentReadError(JsonPageError):
    """Document file exists but could not be read."""
    pass


class DocumentDecodeError(JsonPageError):
    """Document bytes are not a well-formed JSON object."""
    pass


class DesignCacheError(JsonPageError):
    """A design record could not be created or written."""
    pass


class RenderTimeoutError(JsonPageError):
    """A page request exceeded its time budget."""
    pass
