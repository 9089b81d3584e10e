from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from .items import LibraryItem
    from .users import LibraryUser


class Outcome(str, Enum):
    """Result codes reported by registry and user operations."""
    SUCCESS = "success"
    ITEM_NOT_FOUND = "item_not_found"
    ITEM_UNAVAILABLE = "item_unavailable"
    ITEM_ALREADY_AVAILABLE = "item_already_available"
    BORROWING_DENIED = "borrowing_denied"
    INVALID_USER_KIND = "invalid_user_kind"
    USER_NOT_FOUND = "user_not_found"


DEFAULT_MESSAGES: Dict[Outcome, str] = {
    Outcome.SUCCESS: "Operation completed successfully.",
    Outcome.ITEM_NOT_FOUND: "Item not found.",
    Outcome.ITEM_UNAVAILABLE: "Item is not available.",
    Outcome.ITEM_ALREADY_AVAILABLE: "Item is already available.",
    Outcome.BORROWING_DENIED: "Borrowing limit reached or item unavailable.",
    Outcome.INVALID_USER_KIND: "Invalid user type.",
    Outcome.USER_NOT_FOUND: "User not found.",
}


@dataclass(frozen=True)
class OperationResult:
    outcome: Outcome
    message: str
    due_date: Optional[date] = None
    item: Optional["LibraryItem"] = None
    user: Optional["LibraryUser"] = None

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.SUCCESS

    @classmethod
    def success(cls, message: str, **kwargs: Any) -> "OperationResult":
        return cls(Outcome.SUCCESS, message, **kwargs)

    @classmethod
    def failure(cls, outcome: Outcome, message: Optional[str] = None, **kwargs: Any) -> "OperationResult":
        return cls(outcome, message or DEFAULT_MESSAGES[outcome], **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "message": self.message,
            "due_date": self.due_date.isoformat() if self.due_date else None,
        }
