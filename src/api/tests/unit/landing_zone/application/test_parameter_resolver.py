"""Unit tests for ParameterResolver."""

from unittest.mock import AsyncMock, create_autospec, patch

import pytest

from landing_zone.application.observability import ParameterResolverProbe
from landing_zone.application.services import ParameterResolver
from landing_zone.application.value_objects import PollPolicy
from landing_zone.domain.aggregates import ParameterNames
from landing_zone.ports.exceptions import (
    ParameterNotFoundError,
    ParameterResolutionTimeoutError,
)


@pytest.fixture
def mock_probe():
    return create_autospec(ParameterResolverProbe, instance=True)


class TestResolve:
    """Tests for single-parameter resolution."""

    @pytest.mark.asyncio
    async def test_resolving_twice_fetches_once(self, parameter_store, mock_probe):
        """The second resolution of a name is served from the cache."""
        resolver = ParameterResolver(parameter_store, probe=mock_probe)

        first = await resolver.resolve("sso-id")
        second = await resolver.resolve("sso-id")

        assert first == second == "ssoins-1234"
        assert parameter_store.calls == ["sso-id"]
        mock_probe.parameter_resolved.assert_called_once_with(name="sso-id", attempts=1)

    @pytest.mark.asyncio
    async def test_missing_parameter_fails_immediately(self, parameter_store, mock_probe):
        resolver = ParameterResolver(parameter_store, probe=mock_probe)

        with pytest.raises(ParameterNotFoundError) as exc_info:
            await resolver.resolve("missing")

        assert exc_info.value.name == "missing"
        assert parameter_store.calls == ["missing"]
        mock_probe.parameter_resolution_failed.assert_called_once()

    @pytest.mark.asyncio
    async def test_failed_resolution_is_not_cached(self, parameter_store, mock_probe):
        resolver = ParameterResolver(parameter_store, probe=mock_probe)
        with pytest.raises(ParameterNotFoundError):
            await resolver.resolve("late")

        parameter_store.values["late"] = "value"

        assert await resolver.resolve("late") == "value"


class TestResolveWithPolling:
    """Tests for eventually consistent stores."""

    @pytest.mark.asyncio
    async def test_polls_until_parameter_appears(self, parameter_store, mock_probe):
        poll = PollPolicy(max_attempts=4, initial_delay_seconds=0.5, max_delay_seconds=1.0)
        resolver = ParameterResolver(parameter_store, poll=poll, probe=mock_probe)
        get_parameter = AsyncMock(side_effect=[None, None, "d-5678"])

        with (
            patch.object(parameter_store, "get_parameter", get_parameter),
            patch("asyncio.sleep", new_callable=AsyncMock) as sleep,
        ):
            value = await resolver.resolve("identity-store-id")

        assert value == "d-5678"
        assert get_parameter.await_count == 3
        assert [c.args[0] for c in sleep.await_args_list] == [0.5, 1.0]
        mock_probe.parameter_resolved.assert_called_once_with(
            name="identity-store-id", attempts=3
        )

    @pytest.mark.asyncio
    async def test_gives_up_after_last_attempt(self, parameter_store, mock_probe):
        poll = PollPolicy(max_attempts=3, initial_delay_seconds=0.1)
        resolver = ParameterResolver(parameter_store, poll=poll, probe=mock_probe)

        with patch("asyncio.sleep", new_callable=AsyncMock) as sleep:
            with pytest.raises(ParameterResolutionTimeoutError) as exc_info:
                await resolver.resolve("missing")

        assert exc_info.value.attempts == 3
        assert sleep.await_count == 2
        assert parameter_store.calls == ["missing"] * 3
        assert mock_probe.parameter_missing.call_count == 2


class TestResolveDeployment:
    @pytest.mark.asyncio
    async def test_resolves_both_parameters(self, parameter_store):
        resolver = ParameterResolver(parameter_store)

        resolved = await resolver.resolve_deployment(ParameterNames())

        assert resolved.sso_instance_id == "ssoins-1234"
        assert resolved.identity_store_id == "d-1234"
        assert resolved.sso_instance_arn == "arn:aws:sso:::instance/ssoins-1234"


class TestPollPolicy:
    def test_backoff_is_capped(self):
        poll = PollPolicy(initial_delay_seconds=1.0, max_delay_seconds=3.0, multiplier=2.0)

        assert [poll.delay_for(n) for n in range(1, 5)] == [1.0, 2.0, 3.0, 3.0]

    def test_fixed_interval(self):
        poll = PollPolicy.fixed(attempts=3, interval_seconds=10.0)

        assert poll.max_attempts == 3
        assert [poll.delay_for(n) for n in range(1, 4)] == [10.0, 10.0, 10.0]

    def test_requires_an_attempt(self):
        with pytest.raises(ValueError):
            PollPolicy(max_attempts=0)
