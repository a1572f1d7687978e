"""Error taxonomy for naming validation and file-service calls."""


class TakeflowError(Exception):
    """Base exception for the incoming-file engine."""


class TemplateValidationError(TakeflowError):
    """Raised when the naming template cannot be used for a rename.

    The external rename is never attempted when this is raised.
    """


class OperationError(TakeflowError):
    """Raised when the file service answers ``success: false``.

    Attributes:
        reason: Reason reported by the service, verbatim.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class TransportError(TakeflowError):
    """Raised when the file service could not be reached or answered garbage."""


__all__ = ["TakeflowError", "TemplateValidationError", "OperationError", "TransportError"]
