from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from enum import Enum
from typing import Dict, List, Optional, Tuple, Type

from .items import LibraryItem
from .outcomes import OperationResult, Outcome


class UserKind(str, Enum):
    FACULTY = "Faculty"
    STUDENT = "Student"
    GUEST = "Guest"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "UserKind":
        """Resolve a kind name case-insensitively; raises ValueError if unknown."""
        text = (raw or "").strip().lower()
        for kind in cls:
            if kind.value.lower() == text:
                return kind
        raise ValueError(f"Unknown user kind: {raw!r}")


class LibraryUser(ABC):
    """A library patron holding up to ``BORROWING_LIMIT`` items at once."""

    @property
    @abstractmethod
    def kind(self) -> UserKind:
        pass

    @property
    @abstractmethod
    def BORROWING_LIMIT(self) -> int:
        pass

    def __init__(self, name: str) -> None:
        self.name = name
        self._borrowed_items: List[LibraryItem] = []

    @property
    def borrowed_items(self) -> Tuple[LibraryItem, ...]:
        return tuple(self._borrowed_items)

    def get_name(self) -> str:
        return self.name

    def get_borrowing_limit(self) -> int:
        return self.BORROWING_LIMIT

    def get_borrowed_item_count(self) -> int:
        return len(self._borrowed_items)

    def holds(self, item: LibraryItem) -> bool:
        return any(held is item for held in self._borrowed_items)

    def borrow_item(self, item: LibraryItem, today: Optional[date] = None) -> OperationResult:
        """Take ``item`` if under the limit and the item is on the shelf.

        Refusals do not say which of the two checks failed.
        """
        if self.get_borrowed_item_count() < self.get_borrowing_limit() and item.is_available():
            self._borrowed_items.append(item)
            item.borrow(today)
            return OperationResult.success(
                f"Item borrowed successfully. Due Date: {item.due_date.isoformat()}",
                due_date=item.due_date,
                item=item,
                user=self,
            )
        return OperationResult.failure(Outcome.BORROWING_DENIED, item=item, user=self)

    def return_item(self, item: LibraryItem) -> None:
        self._borrowed_items = [held for held in self._borrowed_items if held is not item]
        item.return_item()

    def __str__(self) -> str:
        return f"{self.kind.value} - {self.name}, Borrowed: {self.get_borrowed_item_count()}/{self.BORROWING_LIMIT}"


class FacultyMember(LibraryUser):
    kind = UserKind.FACULTY
    BORROWING_LIMIT = 5


class StudentMember(LibraryUser):
    kind = UserKind.STUDENT
    BORROWING_LIMIT = 3


class GuestMember(LibraryUser):
    kind = UserKind.GUEST
    BORROWING_LIMIT = 1


USER_CLASSES: Dict[UserKind, Type[LibraryUser]] = {
    UserKind.FACULTY: FacultyMember,
    UserKind.STUDENT: StudentMember,
    UserKind.GUEST: GuestMember,
}


def create_user(name: str, kind: str) -> LibraryUser:
    """Build the concrete user for ``kind``; raises ValueError for unknown kinds."""
    return USER_CLASSES[UserKind.parse(kind)](name)
