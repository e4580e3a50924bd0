"""Custom exceptions for sqlcomplete."""


class SqlCompleteError(Exception):
    """Base class for sqlcomplete errors."""


class MetadataRefreshError(SqlCompleteError):
    """Exception raised when a metadata provider fails during a refresh."""

    def __init__(self, category: str, cause: BaseException):
        self.category = category
        self.cause = cause
        super().__init__(f"Failed to load {category}: {cause}")


class MetadataFileError(SqlCompleteError, ValueError):
    """Exception raised when a metadata JSON file cannot be used."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid metadata file {path}: {reason}")
