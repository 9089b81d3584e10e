from datetime import date

import pytest

from library_tracker.library import Library

TODAY = date(2024, 1, 15)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def lib():
    # Fixed clock so due dates in assertions are exact
    return Library(today=lambda: TODAY)
