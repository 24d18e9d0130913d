"""Exception hierarchy for Polyroute."""


class PolyrouteError(Exception):
    """Base exception for all Polyroute errors."""

    pass


class GeometryError(PolyrouteError):
    """Errors in geometric calculations."""

    pass


class InvalidKeyPointError(GeometryError, ValueError):
    """A key point selector outside ORIGIN, MIDPOINT and TERMINUS was used."""

    def __init__(self, key_point: object, operation: str) -> None:
        self.key_point = key_point
        self.operation = operation
        super().__init__(f"Invalid key point {key_point!r} passed to {operation}()")


class DocumentError(PolyrouteError):
    """Errors related to routing document loading or saving."""

    pass


class DocumentLoadError(DocumentError):
    """Error loading a routing document."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load document '{path}': {reason}")


class DocumentSaveError(DocumentError):
    """Error saving a routing document."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save document '{path}': {reason}")


class DocumentFormatError(DocumentError):
    """Document content does not match the expected schema."""

    def __init__(self, path: str, details: str) -> None:
        self.path = path
        self.details = details
        super().__init__(f"Invalid document format '{path}': {details}")


class ConnectorError(PolyrouteError):
    """Errors related to connector processing."""

    pass


class ConnectorProcessingError(ConnectorError):
    """Error processing a specific connector."""

    def __init__(self, connector_id: str, reason: str) -> None:
        self.connector_id = connector_id
        self.reason = reason
        super().__init__(f"Error processing connector '{connector_id}': {reason}")


class ProcessingCancelledError(PolyrouteError):
    """Processing was cancelled by user."""

    def __init__(self, processed_count: int, pending_count: int) -> None:
        self.processed_count = processed_count
        self.pending_count = pending_count
        super().__init__(
            f"Processing cancelled: {processed_count} completed, {pending_count} pending"
        )
