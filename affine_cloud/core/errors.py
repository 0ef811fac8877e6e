"""
User-friendly error taxonomy shared by the server and the client.

Every error the server reports on purpose is a ``UserFriendlyError``
subclass. It is serialized as::

    {"status": 403, "code": "Forbidden", "type": "NO_PERMISSION",
     "name": "ACCESS_DENIED", "message": "...", "data": null}

and the client rebuilds the same exception from that body with
``UserFriendlyError.from_any_error`` so callers can branch on ``name``.
"""

from __future__ import annotations

from enum import Enum
from http import HTTPStatus
from typing import Any, ClassVar, Dict, Optional, Type

import httpx


class ErrorNames(str, Enum):
    """Names of every user-friendly error."""

    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    INVALID_EMAIL = "INVALID_EMAIL"
    WRONG_SIGN_IN_CREDENTIALS = "WRONG_SIGN_IN_CREDENTIALS"
    EMAIL_ALREADY_USED = "EMAIL_ALREADY_USED"
    INVALID_EMAIL_TOKEN = "INVALID_EMAIL_TOKEN"
    AUTHENTICATION_REQUIRED = "AUTHENTICATION_REQUIRED"
    EARLY_ACCESS_REQUIRED = "EARLY_ACCESS_REQUIRED"
    ACCESS_DENIED = "ACCESS_DENIED"
    PAYMENT_DISABLED = "PAYMENT_DISABLED"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    WORKSPACE_NOT_FOUND = "WORKSPACE_NOT_FOUND"
    DOC_NOT_FOUND = "DOC_NOT_FOUND"
    SUBSCRIPTION_NOT_FOUND = "SUBSCRIPTION_NOT_FOUND"
    MAIL_DELIVERY_FAILED = "MAIL_DELIVERY_FAILED"


class ErrorTypes(str, Enum):
    """Coarse categories used to group error names."""

    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    RESOURCE_ALREADY_EXISTS = "RESOURCE_ALREADY_EXISTS"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    AUTHENTICATION_REQUIRED = "AUTHENTICATION_REQUIRED"
    ACTION_FORBIDDEN = "ACTION_FORBIDDEN"
    NO_PERMISSION = "NO_PERMISSION"


class UserFriendlyError(Exception):
    """Base class for errors that are safe to show to end users."""

    status: ClassVar[int] = 500
    type: ClassVar[ErrorTypes] = ErrorTypes.INTERNAL_SERVER_ERROR
    name: ClassVar[ErrorNames] = ErrorNames.INTERNAL_SERVER_ERROR
    default_message: ClassVar[str] = "An internal error occurred."
    from_response: bool = False

    _registry: ClassVar[Dict[str, Type["UserFriendlyError"]]] = {}

    def __init__(self, message: Optional[str] = None, data: Optional[Dict[str, Any]] = None) -> None:
        self.message = message or self.default_message
        self.data = data
        super().__init__(self.message)

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        UserFriendlyError._registry[cls.name.value] = cls

    @property
    def code(self) -> str:
        """HTTP reason phrase of ``status``."""
        try:
            return HTTPStatus(self.status).phrase
        except ValueError:
            return "Unknown"

    def to_json(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "code": self.code,
            "type": self.type.value,
            "name": self.name.value,
            "message": self.message,
            "data": self.data,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name.value}, status={self.status}, message={self.message!r})"

    @classmethod
    def from_json(cls, body: Dict[str, Any]) -> "UserFriendlyError":
        """Rebuild an error from its serialized form.

        Unknown names fall back to a generic error that still carries the
        reported status and message.
        """
        name = body.get("name")
        error_cls = cls._registry.get(name) if isinstance(name, str) else None
        if error_cls is not None:
            return error_cls(body.get("message"), body.get("data"))
        return _status_error(int(body.get("status") or 500), body.get("message"))

    @classmethod
    def from_any_error(cls, error: BaseException) -> "UserFriendlyError":
        """Map any exception onto the taxonomy.

        Args:
            error: A ``UserFriendlyError``, an ``httpx.HTTPStatusError`` or anything else.

        Returns:
            The matching user-friendly error.
        """
        if isinstance(error, UserFriendlyError):
            return error
        if isinstance(error, httpx.HTTPStatusError):
            response = error.response
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and "name" in body:
                friendly = cls.from_json(body)
            else:
                friendly = _status_error(response.status_code, None)
            friendly.from_response = True
            return friendly
        return InternalServerError(str(error) or None)


class InternalServerError(UserFriendlyError):
    status = 500
    type = ErrorTypes.INTERNAL_SERVER_ERROR
    name = ErrorNames.INTERNAL_SERVER_ERROR
    default_message = "An internal error occurred."


class InvalidEmail(UserFriendlyError):
    status = 400
    type = ErrorTypes.INVALID_INPUT
    name = ErrorNames.INVALID_EMAIL
    default_message = "Invalid email address"


class WrongSignInCredentials(UserFriendlyError):
    status = 400
    type = ErrorTypes.INVALID_INPUT
    name = ErrorNames.WRONG_SIGN_IN_CREDENTIALS
    default_message = "Wrong user email or password."


class EmailAlreadyUsed(UserFriendlyError):
    status = 400
    type = ErrorTypes.RESOURCE_ALREADY_EXISTS
    name = ErrorNames.EMAIL_ALREADY_USED
    default_message = "This email has already been registered."


class InvalidEmailToken(UserFriendlyError):
    status = 400
    type = ErrorTypes.INVALID_INPUT
    name = ErrorNames.INVALID_EMAIL_TOKEN
    default_message = "An invalid email token provided."


class AuthenticationRequired(UserFriendlyError):
    status = 401
    type = ErrorTypes.AUTHENTICATION_REQUIRED
    name = ErrorNames.AUTHENTICATION_REQUIRED
    default_message = "You must sign in first to access this resource."


class EarlyAccessRequired(UserFriendlyError):
    status = 402
    type = ErrorTypes.ACTION_FORBIDDEN
    name = ErrorNames.EARLY_ACCESS_REQUIRED
    default_message = "You don't have early access permission."


class AccessDenied(UserFriendlyError):
    status = 403
    type = ErrorTypes.NO_PERMISSION
    name = ErrorNames.ACCESS_DENIED
    default_message = "You do not have permission to access this resource."


class PaymentDisabled(UserFriendlyError):
    status = 404
    type = ErrorTypes.ACTION_FORBIDDEN
    name = ErrorNames.PAYMENT_DISABLED
    default_message = "Payment feature is not enabled on this server."


class UserNotFound(UserFriendlyError):
    status = 404
    type = ErrorTypes.RESOURCE_NOT_FOUND
    name = ErrorNames.USER_NOT_FOUND
    default_message = "User not found."


class WorkspaceNotFound(UserFriendlyError):
    status = 404
    type = ErrorTypes.RESOURCE_NOT_FOUND
    name = ErrorNames.WORKSPACE_NOT_FOUND
    default_message = "Workspace not found."


class DocNotFound(UserFriendlyError):
    status = 404
    type = ErrorTypes.RESOURCE_NOT_FOUND
    name = ErrorNames.DOC_NOT_FOUND
    default_message = "Doc not found."


class SubscriptionNotFound(UserFriendlyError):
    status = 404
    type = ErrorTypes.RESOURCE_NOT_FOUND
    name = ErrorNames.SUBSCRIPTION_NOT_FOUND
    default_message = "Subscription not found."


class MailDeliveryFailed(UserFriendlyError):
    status = 500
    type = ErrorTypes.INTERNAL_SERVER_ERROR
    name = ErrorNames.MAIL_DELIVERY_FAILED
    default_message = "Failed to send email."


_STATUS_FALLBACKS: Dict[int, Type[UserFriendlyError]] = {
    401: AuthenticationRequired,
    402: EarlyAccessRequired,
    403: AccessDenied,
}


def _status_error(status: int, message: Optional[str]) -> UserFriendlyError:
    error_cls = _STATUS_FALLBACKS.get(status)
    if error_cls is not None:
        return error_cls(message)
    error = InternalServerError(message)
    # keep the reported status for statuses without a dedicated error
    error.status = status
    return error


def is_backend_error(error: BaseException) -> bool:
    """Whether ``error`` was produced from a server response."""
    return isinstance(error, httpx.HTTPStatusError) or getattr(error, "from_response", False)
