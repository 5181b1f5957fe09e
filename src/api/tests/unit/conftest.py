"""Unit test fixtures shared across bounded contexts."""

import pytest

from infrastructure.aws import get_session
from infrastructure.settings import (
    get_aws_settings,
    get_parameter_settings,
    get_permission_set_settings,
    get_provisioning_settings,
    get_settings,
)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Drop cached settings so environment changes made by a test apply."""
    caches = (
        get_settings,
        get_aws_settings,
        get_parameter_settings,
        get_permission_set_settings,
        get_provisioning_settings,
        get_session,
    )
    for cached in caches:
        cached.cache_clear()
    yield
    for cached in caches:
        cached.cache_clear()
