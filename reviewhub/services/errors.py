"""Service-level errors mapped to HTTP responses in `reviewhub.main`."""


class NotFoundError(LookupError):
    """Requested row does not exist (or is hidden from the caller)."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequestError(ValueError):
    """Request is missing a required value."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
