"""Node shell exceptions."""


class NodeOperationError(Exception):
    """Raised when a node operation fails for a specific input item."""

    def __init__(self, message: str, item_index: int | None = None):
        super().__init__(message)
        self.message = message
        self.item_index = item_index
