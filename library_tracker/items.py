from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, timedelta
from typing import Any, Dict, Optional


class LibraryItem(ABC):
    """A single loanable unit in the library catalog.

    Concrete kinds fix their own ``kind`` label and loan period through
    ``LOAN_PERIOD_DAYS``. An item is either available (no due date) or
    borrowed (due date set).
    """

    @property
    @abstractmethod
    def kind(self) -> str:
        pass

    @property
    @abstractmethod
    def LOAN_PERIOD_DAYS(self) -> int:
        pass

    def __init__(self, item_id: str) -> None:
        self._item_id = item_id
        self.available = True
        self.due_date: Optional[date] = None

    @property
    def item_id(self) -> str:
        return self._item_id

    def is_available(self) -> bool:
        return self.available

    def borrow(self, today: Optional[date] = None) -> None:
        """Mark the item as borrowed and set its due date.

        Does nothing when the item is already out; callers are expected to
        check ``is_available()`` first.
        """
        if not self.available:
            return
        start = today or date.today()
        self.available = False
        self.due_date = start + timedelta(days=self.LOAN_PERIOD_DAYS)

    def return_item(self) -> None:
        self.available = True
        self.due_date = None

    def display(self) -> str:
        return str(self)

    def __str__(self) -> str:
        text = f"ID: {self._item_id}, Available: {str(self.available).lower()}"
        if self.due_date is not None:
            text += f", Due Date: {self.due_date.isoformat()}"
        return text

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self._item_id,
            "kind": self.kind,
            "available": self.available,
            "due_date": self.due_date.isoformat() if self.due_date else None,
        }


class Book(LibraryItem):
    kind = "Book"
    LOAN_PERIOD_DAYS = 28

    def __init__(self, item_id: str, title: str) -> None:
        super().__init__(item_id)
        self.title = title

    def __str__(self) -> str:
        return f"Book - {self.title}, {super().__str__()}"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["title"] = self.title
        return data


class Magazine(LibraryItem):
    kind = "Magazine"
    LOAN_PERIOD_DAYS = 14

    def __init__(self, item_id: str, issue: str) -> None:
        super().__init__(item_id)
        self.issue = issue

    def __str__(self) -> str:
        return f"Magazine - Issue: {self.issue}, {super().__str__()}"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["issue"] = self.issue
        return data
