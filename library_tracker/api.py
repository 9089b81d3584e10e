import logging
from datetime import datetime
from threading import RLock
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Security
from fastapi.security import APIKeyHeader
from pydantic import BaseModel, Field

from .config import settings
from .library import Library
from .outcomes import OperationResult, Outcome

logger = logging.getLogger(__name__)

STATUS_BY_OUTCOME = {
    Outcome.ITEM_NOT_FOUND: 404,
    Outcome.USER_NOT_FOUND: 404,
    Outcome.ITEM_UNAVAILABLE: 409,
    Outcome.ITEM_ALREADY_AVAILABLE: 409,
    Outcome.BORROWING_DENIED: 409,
    Outcome.INVALID_USER_KIND: 400,
}


# --- Models ---
class ItemModel(BaseModel):
    id: str
    kind: str
    available: bool
    due_date: Optional[str] = None
    title: Optional[str] = None
    issue: Optional[str] = None

class BookCreateModel(BaseModel):
    id: str = Field(min_length=1, description="Catalog id, matched case-insensitively")
    title: str

class MagazineCreateModel(BaseModel):
    id: str = Field(min_length=1, description="Catalog id, matched case-insensitively")
    issue: str

class UserModel(BaseModel):
    name: str
    kind: str
    borrowed: int
    limit: int
    items: List[str] = Field(default_factory=list)

class UserCreateModel(BaseModel):
    name: str
    kind: str = Field(description="Faculty, Student or Guest")

class BorrowResponse(BaseModel):
    id: str
    due_date: str
    user: Optional[str] = None

class ReturnResponse(BaseModel):
    id: str
    available: bool
    user: Optional[str] = None


# --- Security ---
api_key_header = APIKeyHeader(name="X-API-Key")

def get_api_key(api_key: str = Security(api_key_header)):
    """Dependency that validates the API key."""
    if api_key == settings.api_key:
        return api_key
    raise HTTPException(status_code=403, detail="Could not validate credentials")


def _raise_for(result: OperationResult) -> None:
    if not result.ok:
        raise HTTPException(status_code=STATUS_BY_OUTCOME.get(result.outcome, 400), detail=result.message)


def _user_model(user) -> UserModel:
    return UserModel(
        name=user.name,
        kind=user.kind.value,
        borrowed=user.get_borrowed_item_count(),
        limit=user.get_borrowing_limit(),
        items=[item.item_id for item in user.borrowed_items],
    )


def create_app(library: Optional[Library] = None) -> FastAPI:
    """Build the HTTP shell around one Library instance.

    Handlers run on the threadpool, so every call into the library goes
    through a single lock to keep check-then-mutate sequences atomic.
    """
    logging.basicConfig(level=settings.log_level)
    library = library or Library()
    lock = RLock()

    app = FastAPI(title=settings.app_name, version=settings.app_version)
    app.state.library = library

    @app.get("/health")
    def health():
        with lock:
            total_items = len(library.items)
            total_users = len(library.users)
        return {
            "status": "healthy",
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "total_items": total_items,
            "total_users": total_users,
        }

    # --- Items ---
    @app.get("/items", response_model=List[ItemModel])
    def list_items():
        with lock:
            return [ItemModel(**item.to_dict()) for item in library.get_items()]

    @app.get("/items/{item_id}", response_model=ItemModel)
    def get_item(item_id: str):
        with lock:
            item = library.find_item_by_id(item_id)
            if item is None:
                raise HTTPException(status_code=404, detail="Item not found.")
            return ItemModel(**item.to_dict())

    @app.post("/items/books", response_model=ItemModel, status_code=201, dependencies=[Depends(get_api_key)])
    def add_book(payload: BookCreateModel):
        with lock:
            book = library.add_book(payload.id, payload.title)
            return ItemModel(**book.to_dict())

    @app.post("/items/magazines", response_model=ItemModel, status_code=201, dependencies=[Depends(get_api_key)])
    def add_magazine(payload: MagazineCreateModel):
        with lock:
            magazine = library.add_magazine(payload.id, payload.issue)
            return ItemModel(**magazine.to_dict())

    @app.post("/items/{item_id}/borrow", response_model=BorrowResponse, dependencies=[Depends(get_api_key)])
    def borrow_item(item_id: str):
        with lock:
            result = library.borrow_by_id(item_id)
        _raise_for(result)
        return BorrowResponse(id=result.item.item_id, due_date=result.due_date.isoformat())

    @app.post("/items/{item_id}/return", response_model=ReturnResponse, dependencies=[Depends(get_api_key)])
    def return_item(item_id: str):
        with lock:
            result = library.return_by_id(item_id)
        _raise_for(result)
        return ReturnResponse(
            id=result.item.item_id,
            available=result.item.available,
            user=result.user.name if result.user else None,
        )

    # --- Users ---
    @app.get("/users", response_model=List[UserModel])
    def list_users():
        with lock:
            return [_user_model(user) for user in library.get_users()]

    @app.post("/users", response_model=UserModel, status_code=201, dependencies=[Depends(get_api_key)])
    def add_user(payload: UserCreateModel):
        with lock:
            result = library.add_user(payload.name, payload.kind)
            _raise_for(result)
            return _user_model(result.user)

    @app.post("/users/{name}/borrow/{item_id}", response_model=BorrowResponse, dependencies=[Depends(get_api_key)])
    def borrow_for_user(name: str, item_id: str):
        with lock:
            result = library.borrow_for_user(name, item_id)
        _raise_for(result)
        return BorrowResponse(id=result.item.item_id, due_date=result.due_date.isoformat(), user=result.user.name)

    @app.post("/users/{name}/return/{item_id}", response_model=ReturnResponse, dependencies=[Depends(get_api_key)])
    def return_for_user(name: str, item_id: str):
        with lock:
            result = library.return_for_user(name, item_id)
        _raise_for(result)
        return ReturnResponse(id=result.item.item_id, available=result.item.available, user=result.user.name)

    logger.info(f"{settings.app_name} API ready with {len(library.items)} items")
    return app
