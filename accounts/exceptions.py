"""
Exceptions raised by the accounts services.

The API layer turns each of these into a JSON response; see api/main.py.
"""

from typing import Dict, List, Optional


class AccountsError(Exception):
    """Base class for account errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AccountsError):
    """
    One or more field-level failures.

    Attributes:
        errors: Mapping of field name to the list of messages for that field
    """

    def __init__(
        self,
        errors: Dict[str, List[str]],
        message: str = "Validation Error"
    ):
        super().__init__(message)
        self.errors = errors


class ConflictError(ValidationError):
    """A write rejected by the store because a unique value is already taken."""


class UnauthorizedError(AccountsError):
    """Credentials or bearer token were not accepted."""

    def __init__(self, message: str = "Unauthorized.", headers: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.headers = headers
