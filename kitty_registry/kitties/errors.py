"""Error taxonomy for registry calls.

Every failure is a normal outcome of invalid input: none are retriable
and none leave partial state behind. The registry raises a KittyError
subclass; the runtime turns it into a structured response that callers
can switch on by code.

Usage:
    from kitty_registry.kitties.errors import InvalidKittyId, ErrorCode

    try:
        registry.transfer("alice", "bob", 7)
    except InvalidKittyId as e:
        assert e.code is ErrorCode.INVALID_KITTY_ID
"""

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(str, Enum):
    """Categories for error classification.

    - VALIDATION: Caller provided bad input
    - PERMISSION: Caller not authorized
    - RESOURCE: Missing record or exhausted id space
    """

    VALIDATION = "validation"
    PERMISSION = "permission"
    RESOURCE = "resource"


class ErrorCode(str, Enum):
    """Specific error codes for programmatic handling."""

    COUNT_OVERFLOW = "count_overflow"
    INVALID_KITTY_ID = "invalid_kitty_id"
    NOT_OWNER = "not_owner"
    REQUIRE_DIFFERENT_PARENTS = "require_different_parents"


@dataclass
class ErrorResponse:
    """Standardized error response.

    All error responses include:
    - success: Always False
    - error: Human-readable message
    - code: Machine-readable error code
    - category: Error category (validation, permission, resource)
    - retriable: Whether the operation should be retried
    - details: Optional additional context
    """

    success: bool = False
    error: str = ""
    code: str = ""
    category: str = ""
    retriable: bool = False
    details: dict[str, object] | None = None

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for serialization."""
        result: dict[str, object] = {
            "success": self.success,
            "error": self.error,
            "code": self.code,
            "category": self.category,
            "retriable": self.retriable,
        }
        if self.details:
            result["details"] = self.details
        return result


class KittyError(Exception):
    """Base class for every rejected registry call."""

    code: ErrorCode
    category: ErrorCategory
    retriable: bool = False

    def __init__(self, message: str, **details: object) -> None:
        super().__init__(message)
        self.message = message
        self.details = dict(details)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            error=self.message,
            code=self.code.value,
            category=self.category.value,
            retriable=self.retriable,
            details=self.details or None,
        )


class CountOverflow(KittyError):
    """The id counter is at the id type's maximum; nothing can be allocated."""

    code = ErrorCode.COUNT_OVERFLOW
    category = ErrorCategory.RESOURCE

    def __init__(self, max_kitty_id: int) -> None:
        super().__init__(
            f"Kitty id space exhausted (max id {max_kitty_id})",
            max_kitty_id=max_kitty_id,
        )


class InvalidKittyId(KittyError):
    """The referenced id has no kitty record."""

    code = ErrorCode.INVALID_KITTY_ID
    category = ErrorCategory.RESOURCE

    def __init__(self, kitty_id: int) -> None:
        super().__init__(f"Kitty {kitty_id} does not exist", kitty_id=kitty_id)


class NotOwner(KittyError):
    """The caller is not the recorded owner of the kitty."""

    code = ErrorCode.NOT_OWNER
    category = ErrorCategory.PERMISSION

    def __init__(self, caller: str, kitty_id: int) -> None:
        super().__init__(
            f"'{caller}' does not own kitty {kitty_id}",
            caller=caller,
            kitty_id=kitty_id,
        )


class RequireDifferentParents(KittyError):
    """Breeding was requested with the same kitty on both sides."""

    code = ErrorCode.REQUIRE_DIFFERENT_PARENTS
    category = ErrorCategory.VALIDATION

    def __init__(self, kitty_id: int) -> None:
        super().__init__(
            f"Cannot breed kitty {kitty_id} with itself",
            kitty_id=kitty_id,
        )
