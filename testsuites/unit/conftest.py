import pytest

from web_helpers.common import reload_config


@pytest.fixture(autouse=True)
def _fresh_config():
    """Each unit test starts and ends with configuration loaded from scratch."""
    reload_config()
    yield
    reload_config()
