class MetaFSError(Exception):
    """Base exception for MetaFS errors."""
    def __init__(self, message: str, code: str = "ERR_UNKNOWN"):
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")

class UnsupportedOperationError(MetaFSError):
    """Operation is not available on a read-only metadata view."""
    def __init__(self, message: str, operation: str = None):
        code = "ERR_UNSUPPORTED"
        if operation:
            code = f"ERR_UNSUPPORTED_{operation.upper()}"
        self.operation = operation
        super().__init__(message, code=code)

class CacheInvariantError(MetaFSError):
    """A cache entry that must carry metadata was found without it."""
    def __init__(self, message: str):
        super().__init__(message, code="ERR_INVARIANT")

class ConfigurationError(MetaFSError):
    """Configuration error."""
    def __init__(self, message: str):
        super().__init__(message, code="ERR_CONFIG")

class SnapshotError(MetaFSError):
    """Metadata snapshot could not be read or written."""
    def __init__(self, message: str):
        super().__init__(message, code="ERR_SNAPSHOT")
