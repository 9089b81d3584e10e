from datetime import date, timedelta

import pytest

from library_tracker.items import Book, LibraryItem, Magazine


def test_new_item_is_available_without_due_date():
    book = Book("B1", "Dune")
    assert book.is_available() is True
    assert book.due_date is None
    assert book.item_id == "B1"


@pytest.mark.parametrize("item, days", [(Book("B1", "Dune"), 28), (Magazine("M1", "2024-03"), 14)])
def test_borrow_sets_due_date_from_loan_period(item, days):
    start = date(2024, 1, 15)
    item.borrow(start)
    assert item.is_available() is False
    assert item.due_date == start + timedelta(days=days)


def test_borrow_defaults_to_today():
    magazine = Magazine("M1", "Spring")
    magazine.borrow()
    assert magazine.due_date == date.today() + timedelta(days=14)


def test_borrow_when_already_out_is_a_no_op():
    book = Book("B1", "Dune")
    book.borrow(date(2024, 1, 1))
    book.borrow(date(2024, 6, 1))
    assert book.due_date == date(2024, 1, 29)
    assert book.available is False


def test_return_restores_initial_state():
    book = Book("B1", "Dune")
    book.borrow(date(2024, 1, 1))
    book.return_item()
    assert book.available is True
    assert book.due_date is None


def test_return_on_available_item_is_unconditional():
    magazine = Magazine("M1", "Spring")
    magazine.return_item()
    assert magazine.available is True
    assert magazine.due_date is None


def test_display_includes_due_date_only_when_borrowed():
    book = Book("B1", "Dune")
    assert book.display() == "Book - Dune, ID: B1, Available: true"
    book.borrow(date(2024, 1, 15))
    assert book.display() == "Book - Dune, ID: B1, Available: false, Due Date: 2024-02-12"

    magazine = Magazine("M7", "July")
    assert str(magazine) == "Magazine - Issue: July, ID: M7, Available: true"


def test_to_dict_carries_kind_specific_field():
    book = Book("B1", "Dune")
    book.borrow(date(2024, 1, 15))
    assert book.to_dict() == {
        "id": "B1",
        "kind": "Book",
        "available": False,
        "due_date": "2024-02-12",
        "title": "Dune",
    }
    assert Magazine("M1", "May").to_dict()["issue"] == "May"


def test_base_item_cannot_be_instantiated():
    with pytest.raises(TypeError):
        LibraryItem("X1")
