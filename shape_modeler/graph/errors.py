"""Exceptions raised by the graph model."""


class GraphError(Exception):
    """Graph operation rejected because its preconditions do not hold."""
    def __init__(self, message: str, operation: str = ""):
        self.operation = operation
        super().__init__(message)


class InvalidReference(GraphError):
    """An operation named a vertex or edge that is not in the store."""
    def __init__(self, kind: str, ref, operation: str = ""):
        self.kind = kind
        self.ref = ref
        message = f"Unknown {kind} {ref!r}"
        if operation:
            message = f"{operation}: {message}"
        super().__init__(message, operation)
