"""Custom exceptions for graph view operations."""


class GraphLensError(Exception):
    """Base exception for graph view operations."""
    pass


class GraphFetchError(GraphLensError):
    """Raised when the graph-query collaborator fails."""
    pass


class MalformedPayloadError(GraphFetchError):
    """Raised when a fetch response is not a nodes/relationships payload."""
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Malformed graph payload: {reason}")


class InvalidTransitionError(GraphLensError):
    """Raised when a view operation is not allowed in the current state."""
    def __init__(self, operation: str, status: str):
        self.operation = operation
        self.status = status
        super().__init__(f"Cannot {operation} while view is {status}")


class UnknownElementError(GraphLensError):
    """Raised when a clicked element is not part of the displayed graph."""
    def __init__(self, kind: str, element_id: str):
        self.kind = kind
        self.element_id = element_id
        super().__init__(f"Unknown {kind} '{element_id}' in displayed graph")
