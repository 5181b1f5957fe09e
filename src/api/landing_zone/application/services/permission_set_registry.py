"""Permission set registry for the landing zone context.

Holds the single administrative permission set every team account is
assigned. One definition, many assignments.
"""

from __future__ import annotations

import asyncio

from landing_zone.application.observability import (
    DefaultPermissionSetRegistryProbe,
    PermissionSetRegistryProbe,
)
from landing_zone.domain.aggregates import PermissionSetDefinition
from landing_zone.domain.exceptions import ProvisioningError
from landing_zone.domain.value_objects import PermissionSetRef
from landing_zone.ports.clients import IdentityCenterClient


class PermissionSetRegistry:
    """Creates the shared permission set once and hands out the same handle.

    The first call looks the permission set up by name and creates it, with
    its managed policies, when it does not exist. An existing set is
    reconciled with the definition instead of being taken as is.
    Concurrent callers wait on the same lock, and every later call returns
    the cached reference without touching the SSO API. A registry is owned
    by one deployment run.
    """

    def __init__(
        self,
        identity_center: IdentityCenterClient,
        definition: PermissionSetDefinition,
        probe: PermissionSetRegistryProbe | None = None,
    ):
        """Initialize PermissionSetRegistry.

        Args:
            identity_center: SSO API client
            definition: The fixed permission set definition
            probe: Optional domain probe for observability
        """
        self._identity_center = identity_center
        self._definition = definition
        self._probe = probe or DefaultPermissionSetRegistryProbe()
        self._ref: PermissionSetRef | None = None
        self._lock = asyncio.Lock()

    @property
    def definition(self) -> PermissionSetDefinition:
        return self._definition

    async def get_or_create(self, instance_arn: str) -> PermissionSetRef:
        """Return the shared permission set, creating it on first use.

        Args:
            instance_arn: Identity Center instance ARN

        Returns:
            The shared PermissionSetRef

        Raises:
            ValueError: If called again for a different SSO instance
            OrganizationApiUnavailableError: If the SSO API fails
        """
        async with self._lock:
            if self._ref is not None:
                if self._ref.instance_arn != instance_arn:
                    raise ValueError(
                        f"Permission set {self._definition.name} already belongs to "
                        f"instance {self._ref.instance_arn}"
                    )
                return self._ref

            try:
                self._ref = await self._find_or_create(instance_arn)
            except ProvisioningError as e:
                self._probe.permission_set_creation_failed(
                    name=self._definition.name, error=str(e)
                )
                raise

            return self._ref

    async def _find_or_create(self, instance_arn: str) -> PermissionSetRef:
        definition = self._definition
        arn = await self._identity_center.find_permission_set_by_name(
            instance_arn, definition.name
        )
        if arn is not None:
            await self._reconcile(instance_arn, arn)
            return PermissionSetRef(arn=arn, name=definition.name, instance_arn=instance_arn)

        arn = await self._identity_center.create_permission_set(
            instance_arn=instance_arn,
            name=definition.name,
            session_duration=str(definition.session_duration),
            description=definition.description,
        )
        for policy_arn in definition.managed_policy_arns:
            await self._identity_center.attach_managed_policy(
                instance_arn=instance_arn,
                permission_set_arn=arn,
                managed_policy_arn=policy_arn,
            )

        self._probe.permission_set_created(
            name=definition.name,
            arn=arn,
            managed_policy_arns=list(definition.managed_policy_arns),
        )
        return PermissionSetRef(arn=arn, name=definition.name, instance_arn=instance_arn)

    async def _reconcile(self, instance_arn: str, arn: str) -> None:
        """Bring an existing permission set back to the definition.

        Covers a set left half-built by an earlier run whose policy
        attachment failed, and a definition that changed since the set was
        created. Policies the definition no longer names are detached.
        Accounts already provisioned with the set only see the changes
        after it is provisioned again.
        """
        definition = self._definition
        identity_center = self._identity_center

        details = await identity_center.describe_permission_set(instance_arn, arn)
        settings_updated = (
            details.session_duration != str(definition.session_duration)
            or (details.description or "") != definition.description
        )
        if settings_updated:
            await identity_center.update_permission_set(
                instance_arn=instance_arn,
                permission_set_arn=arn,
                session_duration=str(definition.session_duration),
                description=definition.description,
            )

        wanted = set(definition.managed_policy_arns)
        current = await identity_center.list_managed_policies(instance_arn, arn)
        attached = sorted(wanted - current)
        detached = sorted(current - wanted)
        for policy_arn in attached:
            await identity_center.attach_managed_policy(
                instance_arn=instance_arn,
                permission_set_arn=arn,
                managed_policy_arn=policy_arn,
            )
        for policy_arn in detached:
            await identity_center.detach_managed_policy(
                instance_arn=instance_arn,
                permission_set_arn=arn,
                managed_policy_arn=policy_arn,
            )

        if not (settings_updated or attached or detached):
            self._probe.permission_set_reused(name=definition.name, arn=arn)
            return

        request_id = None
        if await identity_center.is_provisioned(instance_arn, arn):
            request_id = await identity_center.provision_permission_set(instance_arn, arn)

        self._probe.permission_set_reconciled(
            name=definition.name,
            arn=arn,
            attached=attached,
            detached=detached,
            settings_updated=settings_updated,
            provisioning_request_id=request_id,
        )
