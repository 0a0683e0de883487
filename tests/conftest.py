import pytest

from predictmap.core.config import get_settings
from predictmap.outputs.registry import get_registry


@pytest.fixture(autouse=True)
def _reset_caches():
    # Tests patch PREDICTMAP_* env vars; make sure neither cached Settings nor
    # a registry built from them leaks into the next test.
    get_settings.cache_clear()
    get_registry.cache_clear()
    yield
    get_settings.cache_clear()
    get_registry.cache_clear()
