"""Shared helpers for the AWS adapter tests.

The boto3 clients are replaced by MagicMock objects; errors are built as
real botocore exceptions so the adapters' error-code handling is exercised.
"""

from unittest.mock import MagicMock, create_autospec

import pytest
from botocore.exceptions import ClientError

from landing_zone.infrastructure.observability import AwsClientProbe


def _client_error(code: str, operation: str = "Operation", **extra) -> ClientError:
    response = {"Error": {"Code": code, "Message": f"{code} raised"}, **extra}
    return ClientError(response, operation)


@pytest.fixture
def client_error():
    """Factory for botocore ClientError instances with a given error code."""
    return _client_error


@pytest.fixture
def boto_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def mock_probe():
    return create_autospec(AwsClientProbe, instance=True)


def pages(client: MagicMock, *page_list: dict) -> None:
    """Make every paginator of the mock client yield the given pages."""
    client.get_paginator.return_value.paginate.return_value = list(page_list)


@pytest.fixture
def set_pages():
    return pages
