import logging
from datetime import date
from typing import Callable, List, Optional

from .items import Book, LibraryItem, Magazine
from .outcomes import OperationResult, Outcome
from .users import LibraryUser, create_user

logger = logging.getLogger(__name__)


class Library:
    """Manages the collection of items and users for the lifetime of the process.

    Every shell talks to the catalog through the methods in the "Workflow"
    section below; each one returns an ``OperationResult`` instead of raising
    for expected conditions such as unknown ids or items already on loan.
    """

    def __init__(self, today: Optional[Callable[[], date]] = None) -> None:
        # Tests pass a fixed clock so due dates are predictable.
        self._today = today or date.today
        self.items: List[LibraryItem] = []
        self.users: List[LibraryUser] = []

    # ------------------------- Registry ------------------------- #
    def add_item(self, item: LibraryItem) -> None:
        """Add a pre-constructed item. Duplicate ids are accepted."""
        if self.find_item_by_id(item.item_id) is not None:
            logger.warning(f"Item id {item.item_id} already exists; lookups keep returning the first one")
        self.items.append(item)
        logger.info(f"{item.kind} added: {item.item_id}")

    def add_user(self, name: str, kind: str) -> OperationResult:
        """Create a user of the given kind (Faculty/Student/Guest) and register it."""
        try:
            user = create_user(name, kind)
        except ValueError:
            logger.warning(f"Rejected user {name!r} with unknown kind {kind!r}")
            return OperationResult.failure(Outcome.INVALID_USER_KIND)
        self.register_user(user)
        return OperationResult.success("User added successfully.", user=user)

    def register_user(self, user: LibraryUser) -> None:
        self.users.append(user)
        logger.info(f"{user.kind.value} user added: {user.name}")

    def find_item_by_id(self, item_id: Optional[str]) -> Optional[LibraryItem]:
        """Case-insensitive exact match on id; the first added item wins."""
        if item_id is None:
            return None
        wanted = item_id.lower()
        for item in self.items:
            if item.item_id.lower() == wanted:
                return item
        return None

    def find_user_by_name(self, name: Optional[str]) -> Optional[LibraryUser]:
        if name is None:
            return None
        wanted = name.lower()
        for user in self.users:
            if user.name.lower() == wanted:
                return user
        return None

    def get_items(self) -> List[LibraryItem]:
        return list(self.items)

    def get_users(self) -> List[LibraryUser]:
        return list(self.users)

    # ------------------------- Workflow ------------------------- #
    def list_items(self) -> List[str]:
        return [item.display() for item in self.items]

    def list_users(self) -> List[str]:
        return [str(user) for user in self.users]

    def add_book(self, item_id: str, title: str) -> Book:
        book = Book(item_id, title)
        self.add_item(book)
        return book

    def add_magazine(self, item_id: str, issue: str) -> Magazine:
        magazine = Magazine(item_id, issue)
        self.add_item(magazine)
        return magazine

    def borrow_by_id(self, item_id: str) -> OperationResult:
        item = self.find_item_by_id(item_id)
        if item is None:
            logger.warning(f"Borrow refused: no item with id {item_id!r}")
            return OperationResult.failure(Outcome.ITEM_NOT_FOUND)
        if not item.is_available():
            logger.warning(f"Borrow refused: {item.item_id} is already on loan")
            return OperationResult.failure(Outcome.ITEM_UNAVAILABLE, item=item)

        item.borrow(self._today())
        logger.info(f"{item.kind} {item.item_id} borrowed, due {item.due_date.isoformat()}")
        return OperationResult.success(
            f"Item borrowed successfully. Due Date: {item.due_date.isoformat()}",
            due_date=item.due_date,
            item=item,
        )

    def return_by_id(self, item_id: str) -> OperationResult:
        item = self.find_item_by_id(item_id)
        if item is None:
            logger.warning(f"Return refused: no item with id {item_id!r}")
            return OperationResult.failure(Outcome.ITEM_NOT_FOUND)
        if item.is_available():
            logger.warning(f"Return refused: {item.item_id} is already available")
            return OperationResult.failure(Outcome.ITEM_ALREADY_AVAILABLE, item=item)

        holder = self._release(item)
        logger.info(f"{item.kind} {item.item_id} returned")
        return OperationResult.success("Item returned successfully.", item=item, user=holder)

    def borrow_for_user(self, user_name: str, item_id: str) -> OperationResult:
        """Lend an item to a registered user, enforcing that user's borrowing limit."""
        user = self.find_user_by_name(user_name)
        if user is None:
            return OperationResult.failure(Outcome.USER_NOT_FOUND)
        item = self.find_item_by_id(item_id)
        if item is None:
            return OperationResult.failure(Outcome.ITEM_NOT_FOUND, user=user)

        result = user.borrow_item(item, self._today())
        if result.ok:
            logger.info(f"{item.kind} {item.item_id} lent to {user.name}, due {item.due_date.isoformat()}")
        else:
            logger.warning(
                f"Lending {item.item_id} to {user.name} denied "
                f"({user.get_borrowed_item_count()}/{user.get_borrowing_limit()} held, available={item.available})"
            )
        return result

    def return_for_user(self, user_name: str, item_id: str) -> OperationResult:
        user = self.find_user_by_name(user_name)
        if user is None:
            return OperationResult.failure(Outcome.USER_NOT_FOUND)
        item = self.find_item_by_id(item_id)
        if item is None:
            return OperationResult.failure(Outcome.ITEM_NOT_FOUND, user=user)
        if item.is_available():
            return OperationResult.failure(Outcome.ITEM_ALREADY_AVAILABLE, item=item, user=user)

        user.return_item(item)
        self._release(item)
        logger.info(f"{item.kind} {item.item_id} returned by {user.name}")
        return OperationResult.success("Item returned successfully.", item=item, user=user)

    def _release(self, item: LibraryItem) -> Optional[LibraryUser]:
        """Put the item back on the shelf and drop it from every held list."""
        holders = [user for user in self.users if user.holds(item)]
        for holder in holders:
            holder.return_item(item)
        if not holders:
            item.return_item()
        return holders[0] if holders else None
