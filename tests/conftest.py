"""Shared fixtures for the test suite."""

import pytest

from tests.helpers import FakeExpenseRepository


@pytest.fixture
def fake_repo() -> FakeExpenseRepository:
    return FakeExpenseRepository()
