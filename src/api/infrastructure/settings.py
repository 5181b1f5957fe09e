"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from landing_zone.domain.value_objects import SessionDuration


class AWSSettings(BaseSettings):
    """AWS client settings.

    Environment variables:
        LANDING_ZONE_AWS_REGION: Region used for regional APIs (default: eu-central-1)
        LANDING_ZONE_AWS_PROFILE: Named profile from the shared credentials file (optional)
        LANDING_ZONE_AWS_MAX_ATTEMPTS: botocore retry attempts for throttled calls (default: 5)
    """

    model_config = SettingsConfigDict(
        env_prefix="LANDING_ZONE_AWS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    region: str = Field(default="eu-central-1", description="AWS region")
    profile: str | None = Field(default=None, description="AWS profile name")
    max_attempts: int = Field(
        default=5,
        description="Retry attempts for throttled AWS calls",
        ge=1,
        le=20,
    )


class ParameterSettings(BaseSettings):
    """Parameter store settings.

    Environment variables:
        LANDING_ZONE_PARAMETERS_SSO_ID_NAME: Parameter holding the SSO instance id (default: sso-id)
        LANDING_ZONE_PARAMETERS_IDENTITY_STORE_ID_NAME: Parameter holding the identity store id
            (default: identity-store-id)
        LANDING_ZONE_PARAMETERS_POLL_UNTIL_PRESENT: Poll for missing parameters instead of
            failing immediately (default: false)
        LANDING_ZONE_PARAMETERS_MAX_ATTEMPTS: Poll attempts before giving up (default: 5)
        LANDING_ZONE_PARAMETERS_INITIAL_DELAY_SECONDS: First backoff delay (default: 0.5)
        LANDING_ZONE_PARAMETERS_MAX_DELAY_SECONDS: Backoff ceiling (default: 8.0)
    """

    model_config = SettingsConfigDict(
        env_prefix="LANDING_ZONE_PARAMETERS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    sso_id_name: str = Field(default="sso-id", description="SSO instance id parameter")
    identity_store_id_name: str = Field(
        default="identity-store-id",
        description="Identity store id parameter",
    )
    poll_until_present: bool = Field(
        default=False,
        description="Poll with backoff when a parameter is missing",
    )
    max_attempts: int = Field(default=5, ge=1, le=50)
    initial_delay_seconds: float = Field(default=0.5, ge=0)
    max_delay_seconds: float = Field(default=8.0, ge=0)

    @model_validator(mode="after")
    def validate_backoff(self) -> "ParameterSettings":
        """Validate max delay >= initial delay."""
        if self.max_delay_seconds < self.initial_delay_seconds:
            raise ValueError(
                f"max_delay_seconds ({self.max_delay_seconds}) must be >= "
                f"initial_delay_seconds ({self.initial_delay_seconds})"
            )
        return self


class PermissionSetSettings(BaseSettings):
    """Definition of the shared administrative permission set.

    Environment variables:
        LANDING_ZONE_PERMISSION_SET_NAME: Permission set name
            (default: Cloud-Team-AdministratorAccess)
        LANDING_ZONE_PERMISSION_SET_SESSION_DURATION: ISO-8601 duration (default: PT1H)
        LANDING_ZONE_PERMISSION_SET_MANAGED_POLICY_ARNS: JSON list of managed policy ARNs
        LANDING_ZONE_PERMISSION_SET_DESCRIPTION: Permission set description
    """

    model_config = SettingsConfigDict(
        env_prefix="LANDING_ZONE_PERMISSION_SET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    name: str = Field(
        default="Cloud-Team-AdministratorAccess",
        min_length=1,
        max_length=32,
    )
    session_duration: str = Field(default="PT1H")
    managed_policy_arns: list[str] = Field(
        default_factory=lambda: ["arn:aws:iam::aws:policy/AdministratorAccess"],
        min_length=1,
    )
    description: str = Field(
        default="Administrative access for team accounts",
        max_length=700,
    )

    @field_validator("session_duration")
    @classmethod
    def validate_session_duration(cls, value: str) -> str:
        """Reject durations Identity Center would refuse."""
        SessionDuration.parse(value)
        return value


class ProvisioningSettings(BaseSettings):
    """Provisioning workflow settings.

    Environment variables:
        LANDING_ZONE_PROVISIONING_TEAMS_OU_KEY: Descriptor key of the default teams OU (default: teams)
        LANDING_ZONE_PROVISIONING_TEAM_CONCURRENCY: Teams provisioned in parallel (default: 4)
        LANDING_ZONE_PROVISIONING_ACCOUNT_POLL_ATTEMPTS: Account status polls (default: 60)
        LANDING_ZONE_PROVISIONING_ACCOUNT_POLL_INTERVAL_SECONDS: Delay between polls (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="LANDING_ZONE_PROVISIONING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    teams_ou_key: str = Field(default="teams", min_length=1)
    team_concurrency: int = Field(default=4, ge=1, le=32)
    account_poll_attempts: int = Field(default=60, ge=1)
    account_poll_interval_seconds: float = Field(default=10.0, ge=0)


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Landing Zone API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Minimum log level")

    @property
    def aws(self) -> AWSSettings:
        """Get AWS settings."""
        return get_aws_settings()

    @property
    def parameters(self) -> ParameterSettings:
        """Get parameter store settings."""
        return get_parameter_settings()

    @property
    def permission_set(self) -> PermissionSetSettings:
        """Get permission set settings."""
        return get_permission_set_settings()

    @property
    def provisioning(self) -> ProvisioningSettings:
        """Get provisioning settings."""
        return get_provisioning_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_aws_settings() -> AWSSettings:
    """Get cached AWS settings."""
    return AWSSettings()


@lru_cache
def get_parameter_settings() -> ParameterSettings:
    """Get cached parameter store settings."""
    return ParameterSettings()


@lru_cache
def get_permission_set_settings() -> PermissionSetSettings:
    """Get cached permission set settings."""
    return PermissionSetSettings()


@lru_cache
def get_provisioning_settings() -> ProvisioningSettings:
    """Get cached provisioning settings."""
    return ProvisioningSettings()
