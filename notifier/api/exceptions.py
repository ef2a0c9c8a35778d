"""HTTP-layer exceptions."""


class InvalidRequestError(Exception):
    """A request body failed validation; returned to the caller as a 400."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
