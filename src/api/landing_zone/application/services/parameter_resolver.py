"""Parameter resolver for the landing zone context.

Resolves named configuration values (the SSO instance id, the identity
store id) from the parameter store while a deployment is composed.
"""

from __future__ import annotations

import asyncio

from landing_zone.application.observability import (
    DefaultParameterResolverProbe,
    ParameterResolverProbe,
)
from landing_zone.application.value_objects import PollPolicy, ResolvedParameters
from landing_zone.domain.aggregates import ParameterNames
from landing_zone.ports.clients import ParameterStore
from landing_zone.ports.exceptions import (
    ParameterNotFoundError,
    ParameterResolutionTimeoutError,
)


class ParameterResolver:
    """Resolves parameters once per composition run.

    Every value is cached after the first successful read, so resolving the
    same name twice within a run returns the same value without a second
    fetch. A resolver therefore belongs to exactly one deployment run.

    When the store is eventually consistent a PollPolicy can be supplied:
    missing parameters are then polled with bounded backoff and the
    resolver raises ParameterResolutionTimeoutError after the last attempt.
    Without a policy a missing parameter fails immediately.
    """

    def __init__(
        self,
        store: ParameterStore,
        poll: PollPolicy | None = None,
        probe: ParameterResolverProbe | None = None,
    ):
        """Initialize ParameterResolver.

        Args:
            store: Parameter store to read from
            poll: Optional backoff policy for missing parameters
            probe: Optional domain probe for observability
        """
        self._store = store
        self._poll = poll
        self._probe = probe or DefaultParameterResolverProbe()
        self._cache: dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def resolve(self, name: str) -> str:
        """Return the value stored under a parameter name.

        Args:
            name: Logical parameter name (e.g. "sso-id")

        Returns:
            The parameter value

        Raises:
            ParameterNotFoundError: If the parameter does not exist
            ParameterResolutionTimeoutError: If polling gave up
        """
        async with self._lock:
            if name in self._cache:
                return self._cache[name]

            try:
                value = await self._fetch(name)
            except (ParameterNotFoundError, ParameterResolutionTimeoutError) as e:
                self._probe.parameter_resolution_failed(name=name, error=str(e))
                raise

            self._cache[name] = value
            return value

    async def _fetch(self, name: str) -> str:
        if self._poll is None:
            value = await self._store.get_parameter(name)
            if value is None:
                raise ParameterNotFoundError(name)
            self._probe.parameter_resolved(name=name, attempts=1)
            return value

        for attempt in range(1, self._poll.max_attempts + 1):
            value = await self._store.get_parameter(name)
            if value is not None:
                self._probe.parameter_resolved(name=name, attempts=attempt)
                return value

            if attempt < self._poll.max_attempts:
                delay = self._poll.delay_for(attempt)
                self._probe.parameter_missing(name=name, attempt=attempt, retry_in=delay)
                await asyncio.sleep(delay)

        raise ParameterResolutionTimeoutError(name, self._poll.max_attempts)

    async def resolve_deployment(self, names: ParameterNames) -> ResolvedParameters:
        """Resolve every parameter a deployment depends on.

        Args:
            names: The parameter names declared by the deployment

        Returns:
            ResolvedParameters with the SSO instance and identity store ids
        """
        return ResolvedParameters(
            sso_instance_id=await self.resolve(names.sso_instance_id),
            identity_store_id=await self.resolve(names.identity_store_id),
        )
