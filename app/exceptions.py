"""
Error taxonomy shared by the repository, the sweeper and the routes.
"""


class PasteError(Exception):
    """Base class for paste-related errors."""


class ValidationError(PasteError):
    """Raised when a paste submission is missing required input."""


class PasteNotFoundError(PasteError):
    """Raised when a paste is absent or logically expired."""

    def __init__(self, paste_id: str, expired: bool = False):
        self.paste_id = paste_id
        self.expired = expired
        super().__init__(f"Paste {paste_id} not found")


class StoreFault(PasteError):
    """Raised when the underlying key-value store fails."""


class IdentifierExhausted(StoreFault):
    """Raised when no free identifier could be generated."""
