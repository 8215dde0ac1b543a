import pytest

from backend.catalog import Catalog
from tests.factories import build_catalog


@pytest.fixture
def catalog() -> Catalog:
    """Ten greetings followed by ten food items (ids 1-10 and 11-20)."""
    return build_catalog([("greeting", 10), ("food", 10)])
