"""
core/exceptions.py
------------------
Failures raised by the service layer.

Every FacadeError carries a message that is safe to show to an end user.
Services raise these; only the facade boundary converts them into error
envelopes. Anything that is not a FacadeError is treated as an opaque store
or network failure and replaced by the operation's fallback message.
"""

DEFAULT_ERROR_MESSAGE = "Terjadi kesalahan"


class FacadeError(Exception):
    """Base class for user-facing failures."""

    def __init__(self, message: str = DEFAULT_ERROR_MESSAGE) -> None:
        super().__init__(message)
        self.message = message


class ValidationFailed(FacadeError):
    """Rejected input; raised before any store call is issued."""


class NotFound(FacadeError):
    def __init__(self, message: str = "Data tidak ditemukan") -> None:
        super().__init__(message)


class AuthenticationFailed(FacadeError):
    def __init__(self, message: str = "Email atau kata sandi salah.") -> None:
        super().__init__(message)


class BusinessRuleViolation(FacadeError):
    """The request is well-formed but the current state forbids it."""


class IdentityError(FacadeError):
    """The identity provider refused to create or remove an identity."""
