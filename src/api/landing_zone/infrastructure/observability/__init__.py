"""Infrastructure observability for the landing zone context."""

from landing_zone.infrastructure.observability.aws_client_probe import (
    AwsClientProbe,
    DefaultAwsClientProbe,
)

__all__ = [
    "AwsClientProbe",
    "DefaultAwsClientProbe",
]
