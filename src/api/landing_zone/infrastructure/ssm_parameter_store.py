"""SSM Parameter Store implementation of the ParameterStore port."""

from __future__ import annotations

import asyncio
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from landing_zone.infrastructure.aws_errors import error_code, unavailable
from landing_zone.infrastructure.observability import (
    AwsClientProbe,
    DefaultAwsClientProbe,
)


class SsmParameterStore:
    """Reads string parameters from SSM Parameter Store."""

    def __init__(self, client: Any, probe: AwsClientProbe | None = None):
        """Initialize SsmParameterStore.

        Args:
            client: boto3 "ssm" client
            probe: Optional domain probe for observability
        """
        self._client = client
        self._probe = probe or DefaultAwsClientProbe()

    async def get_parameter(self, name: str) -> str | None:
        """Read a parameter value, or None if it does not exist.

        Raises:
            OrganizationApiUnavailableError: If SSM fails for another reason
        """
        try:
            response = await asyncio.to_thread(
                self._client.get_parameter, Name=name, WithDecryption=True
            )
        except ClientError as e:
            if error_code(e) == "ParameterNotFound":
                return None
            raise unavailable("ssm", "GetParameter", e, self._probe) from e
        except BotoCoreError as e:
            raise unavailable("ssm", "GetParameter", e, self._probe) from e

        return response["Parameter"]["Value"]
