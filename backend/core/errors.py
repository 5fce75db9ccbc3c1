"""Error taxonomy shared by repositories, the auth gate and the routes.

Every error carries the HTTP status it is reported with and an optional
``result`` payload that ends up in the response envelope.
"""

from typing import Any


class ClinicError(Exception):
    status_code = 500
    default_message = 'An internal server error occurred.'

    def __init__(self, message: str | None = None, result: Any = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.result = result


class ConfigurationError(ClinicError):
    """A required secret or setting is absent.

    The detailed message is logged but never sent to the caller.
    """

    status_code = 500
    default_message = 'Server configuration error.'


class ValidationError(ClinicError):
    status_code = 400
    default_message = 'Invalid request.'


class AuthenticationError(ClinicError):
    status_code = 401
    default_message = 'Access denied. Invalid token.'

    def __init__(self, message: str | None = None, error_type: str | None = None) -> None:
        super().__init__(message, result={'error_type': error_type} if error_type else None)
        self.error_type = error_type


class AuthorizationError(ClinicError):
    status_code = 403
    default_message = 'Forbidden.'


class NotFoundError(ClinicError):
    status_code = 404
    default_message = 'Resource not found.'


class ConflictError(ClinicError):
    status_code = 409
    default_message = 'Resource already exists.'


class StorageError(ClinicError):
    status_code = 500
    default_message = 'A database error occurred.'

    def __init__(self, message: str | None = None, details: str | None = None) -> None:
        super().__init__(message, result={'error_details': details} if details else None)
