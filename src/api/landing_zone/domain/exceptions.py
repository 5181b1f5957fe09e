"""Domain exceptions for the landing zone bounded context.

These cover problems detected locally, before any request reaches the
organization or SSO services.
"""


class ProvisioningError(Exception):
    """Base exception for landing zone provisioning errors."""

    pass


class OrganizationTreeError(ProvisioningError):
    """Raised when the declared organizational units do not form a strict tree.

    Covers unknown parents, cycles, duplicate keys and two units with the
    same name under one parent.
    """

    pass


class DeploymentDescriptorError(ProvisioningError):
    """Raised when a deployment descriptor fails local validation.

    Carries every problem found so the operator can fix them in one pass
    instead of discovering them one deployment at a time.
    """

    def __init__(self, problems: list[str]):
        self.problems = list(problems)
        super().__init__(
            "Invalid deployment descriptor: " + "; ".join(self.problems)
        )
