"""Error Hierarchy — typed, categorized exceptions for all shopping-list failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Each category maps to exactly one HTTP status (400/401/403/404/409/500)
    - to_response() produces the REST envelope; messages never carry storage details

Design Decisions:
    - Single hierarchy with ShoppingListError base: FastAPI global handler catches all
    - Category base classes (AuthenticationError, ConflictError, ...) let callers and tests
      match on the class of failure without enumerating every concrete error
    - ErrorContext as dataclass: identifiers for logs without coupling to the logging framework
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    PERMISSION = "permission"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Identifiers attached to an error for logs."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    list_id: str | None = None
    invitation_id: str | None = None
    debug_info: dict[str, Any] | None = None


class ShoppingListError(Exception):
    """Base exception for all shopping-list errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            }
        }


# ─── Validation (400) ───────────────────────────────────────────

class InputValidationError(ShoppingListError):
    """Blank or malformed input."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.field = field


# ─── Authentication (401) ───────────────────────────────────────

class AuthenticationError(ShoppingListError):
    """Base for invalid or expired credentials of any kind."""
    def __init__(self, message: str, code: str, context: ErrorContext | None = None):
        super().__init__(
            message, code, ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class InvalidOrExpiredCodeError(AuthenticationError):
    def __init__(self, context: ErrorContext | None = None):
        super().__init__("Invalid or expired code", "INVALID_OR_EXPIRED_CODE", context)


class InvitationRequiredError(AuthenticationError):
    """Unknown email without a pending invitation."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Invitation required for new users", "INVITATION_REQUIRED", context,
        )


class InvalidTokenError(AuthenticationError):
    def __init__(self, message: str = "Invalid token", context: ErrorContext | None = None):
        super().__init__(message, "INVALID_TOKEN", context)


class InvalidOrExpiredInvitationError(AuthenticationError):
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Invalid or expired invitation", "INVALID_OR_EXPIRED_INVITATION", context,
        )


# ─── Permission (403) ───────────────────────────────────────────

class PermissionDeniedError(ShoppingListError):
    """Caller has no access to the resource."""
    def __init__(
        self, message: str = "Access denied", code: str = "ACCESS_DENIED",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.PERMISSION,
            ErrorSeverity.WARNING, context, 403,
        )


class NotOwnerError(PermissionDeniedError):
    """Operation reserved to list owners."""
    def __init__(self, action: str, context: ErrorContext | None = None):
        super().__init__(f"Only list owners can {action}", "NOT_OWNER", context)
        self.action = action


class NotListOwnerError(PermissionDeniedError):
    """List invitation attempted by someone who does not own the list."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "User is not the owner of this list", "NOT_LIST_OWNER", context,
        )


# ─── Not Found (404) ────────────────────────────────────────────

class ResourceNotFoundError(ShoppingListError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
        message: str | None = None, code: str = "RESOURCE_NOT_FOUND",
    ):
        super().__init__(
            message or f"{resource_type} '{resource_id}' not found",
            code, ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ListNotFoundOrAccessDeniedError(ResourceNotFoundError):
    """Missing list and missing membership are indistinguishable to the caller."""
    def __init__(self, list_id: str, context: ErrorContext | None = None):
        super().__init__(
            "ShoppingList", list_id, context,
            message="List not found or access denied",
            code="LIST_NOT_FOUND_OR_ACCESS_DENIED",
        )


class MemberNotFoundError(ResourceNotFoundError):
    def __init__(self, member_id: str, context: ErrorContext | None = None):
        super().__init__(
            "ListMember", member_id, context,
            message="Member not found", code="MEMBER_NOT_FOUND",
        )


class ItemNotFoundError(ResourceNotFoundError):
    def __init__(self, item_id: str, context: ErrorContext | None = None):
        super().__init__(
            "ShoppingItem", item_id, context,
            message="Item not found", code="ITEM_NOT_FOUND",
        )


class InvitationNotFoundOrUsedError(ResourceNotFoundError):
    """Not found, not yours and already used all collapse into this one error."""
    def __init__(self, invitation_id: str, context: ErrorContext | None = None):
        super().__init__(
            "Invitation", invitation_id, context,
            message="Invitation not found or already used",
            code="INVITATION_NOT_FOUND_OR_USED",
        )


# ─── Conflict (409) ─────────────────────────────────────────────

class ConflictError(ShoppingListError):
    """State already exists or an invariant would be broken."""
    def __init__(self, message: str, code: str, context: ErrorContext | None = None):
        super().__init__(
            message, code, ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


class UserAlreadyExistsError(ConflictError):
    def __init__(self, context: ErrorContext | None = None):
        super().__init__("User already exists", "USER_ALREADY_EXISTS", context)


class AlreadyMemberError(ConflictError):
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "User is already a member of this list", "ALREADY_MEMBER", context,
        )


class AlreadyInvitedError(ConflictError):
    def __init__(self, context: ErrorContext | None = None):
        super().__init__("User is already invited", "ALREADY_INVITED", context)


class LastOwnerProtectionError(ConflictError):
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Cannot remove the last owner from the list",
            "LAST_OWNER_PROTECTION", context,
        )


class SystemAlreadySetupError(ConflictError):
    def __init__(self, context: ErrorContext | None = None):
        super().__init__("System is already setup", "SYSTEM_ALREADY_SETUP", context)


# ─── Downstream Failures (500) ──────────────────────────────────

class DatabaseError(ShoppingListError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation


class MailDeliveryError(ShoppingListError):
    """Outbound email could not be handed to the SMTP server."""
    def __init__(self, recipient: str, reason: str, context: ErrorContext | None = None):
        super().__init__(
            "Failed to send email", "MAIL_DELIVERY_FAILED", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.recipient = recipient
        self.reason = reason
