"""boto3 session and client construction.

Clients are created from one cached session so every adapter shares the
same credentials resolution and retry configuration.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

import boto3
from botocore.config import Config

from infrastructure.settings import AWSSettings, get_aws_settings

# Organizations and Identity Center are global services homed in us-east-1.
GLOBAL_REGION = "us-east-1"


def build_session(settings: AWSSettings) -> boto3.session.Session:
    """Create a boto3 session for the configured profile and region."""
    return boto3.session.Session(
        profile_name=settings.profile,
        region_name=settings.region,
    )


def client_config(settings: AWSSettings) -> Config:
    """botocore configuration with adaptive retries for throttled calls."""
    return Config(
        retries={"max_attempts": settings.max_attempts, "mode": "adaptive"},
        user_agent_extra="landing-zone",
    )


@lru_cache
def get_session() -> boto3.session.Session:
    """Get the cached boto3 session."""
    return build_session(get_aws_settings())


def create_client(service_name: str, region_name: str | None = None) -> Any:
    """Create a boto3 client from the cached session.

    Args:
        service_name: boto3 service name (e.g. "organizations")
        region_name: Region override; defaults to the configured region
    """
    settings = get_aws_settings()
    return get_session().client(
        service_name,
        region_name=region_name or settings.region,
        config=client_config(settings),
    )
