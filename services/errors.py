class ValidationError(Exception):
    """Input rejected before any data-store call is made."""


class RemoteOperationError(Exception):
    """A data-store or auth call failed.

    ``message`` is human readable and shown verbatim after the screen's
    localized prefix.
    """

    def __init__(self, message, code=None):
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self):
        return self.message
