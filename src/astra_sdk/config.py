"""Configuration for the Astra SDK.

Uses Pydantic v2 for validation with sensible defaults. A configuration is
frozen once built: one instance describes one target deployment.
"""

from __future__ import annotations

from typing import Annotated, Any, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    SecretStr,
    field_validator,
    model_validator,
)

from .errors import InvalidConfigError

ASTRA_ENDPOINT_TEMPLATE = "https://{db_id}-{region}.apps.astra.datastax.com/api/rest"
DEFAULT_DEVOPS_URL = "https://api.astra.datastax.com/v2"
DEFAULT_TOKEN_TTL = 300.0
DEFAULT_TIMEOUT = 10.0

# Environment variable names
ENV_DB_ID = "ASTRA_DB_ID"
ENV_DB_REGION = "ASTRA_DB_REGION"
ENV_DB_USERNAME = "ASTRA_DB_USERNAME"
ENV_DB_PASSWORD = "ASTRA_DB_PASSWORD"
ENV_USERNAME = "USERNAME"
ENV_PASSWORD = "PASSWORD"
ENV_BASE_URL = "BASE_URL"
ENV_TOKEN_TTL = "TOKEN_TTL"
ENV_APPLICATION_TOKEN = "ASTRA_DB_APPLICATION_TOKEN"


def database_base_url(db_id: str, region: str) -> str:
    """Derive the REST endpoint of a cloud database from its id and region."""
    return ASTRA_ENDPOINT_TEMPLATE.format(db_id=db_id, region=region)


class TelemetryConfig(BaseModel):
    """Logging and tracing configuration."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    service_name: str = "astra-sdk"
    log_level: str = "INFO"


class AstraConfig(BaseModel):
    """Resolved session settings for one deployment."""

    model_config = ConfigDict(frozen=True, validate_default=True)

    base_url: HttpUrl

    # Either username/password or a static bearer token
    username: str | None = None
    password: SecretStr | None = None
    bearer_token: SecretStr | None = None

    token_ttl: Annotated[float, Field(gt=0)] = DEFAULT_TOKEN_TTL
    timeout: Annotated[float, Field(gt=0, le=300)] = DEFAULT_TIMEOUT

    auth_path: str = "/v1/auth/"
    document_api_prefix: str = "/v2"
    token_header: str = "X-Cassandra-Token"
    invalidate_on_unauthorized: bool = False

    devops_url: HttpUrl = DEFAULT_DEVOPS_URL  # type: ignore[assignment]
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)

    @model_validator(mode="before")
    @classmethod
    def check_required_fields(cls, data: Any) -> Any:
        """Report every missing required field in a single error."""
        if not isinstance(data, dict):
            return data

        def present(key: str) -> bool:
            value = data.get(key)
            if isinstance(value, SecretStr):
                value = value.get_secret_value()
            return value is not None and str(value) != ""

        missing: list[str] = []
        if not present("base_url"):
            missing.append("base_url")
        if not present("bearer_token"):
            missing.extend(key for key in ("username", "password") if not present(key))

        if missing:
            msg = f"Missing required configuration: {', '.join(missing)}"
            if "username" in missing or "password" in missing:
                msg += " (or provide bearer_token)"
            raise InvalidConfigError(msg, fields=missing)
        return data

    @field_validator("auth_path", "document_api_prefix")
    @classmethod
    def ensure_leading_slash(cls, v: str) -> str:
        """Normalize path settings so they can be appended to the base URL."""
        if not v.startswith("/"):
            v = "/" + v
        return v

    @property
    def base_url_str(self) -> str:
        """Get base URL as string without trailing slash."""
        return str(self.base_url).rstrip("/")

    @property
    def devops_url_str(self) -> str:
        """Get DevOps API URL as string without trailing slash."""
        return str(self.devops_url).rstrip("/")

    @property
    def auth_url(self) -> str:
        """Full URL of the authentication endpoint."""
        return f"{self.base_url_str}{self.auth_path}"

    @property
    def uses_bearer_token(self) -> bool:
        """Whether requests use a static token instead of a credential exchange."""
        return self.bearer_token is not None

    def with_overrides(self, **kwargs: Any) -> Self:
        """Create new config with overridden values."""
        data = self.model_dump()
        for key in ("password", "bearer_token"):
            secret = getattr(self, key)
            data[key] = secret.get_secret_value() if secret is not None else None
        data["base_url"] = str(self.base_url)
        data["devops_url"] = str(self.devops_url)
        data.update(kwargs)
        return self.__class__(**data)

    @classmethod
    def for_database(
        cls,
        db_id: str,
        region: str,
        **kwargs: Any,
    ) -> Self:
        """Create config for a cloud database identified by id and region."""
        missing = [name for name, value in (("db_id", db_id), ("region", region)) if not value]
        if missing:
            msg = f"Missing required configuration: {', '.join(missing)}"
            raise InvalidConfigError(msg, fields=missing)
        return cls(base_url=database_base_url(db_id, region), **kwargs)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> Self:
        """Create config from environment variables.

        ``USERNAME``/``PASSWORD`` take precedence over the ``ASTRA_DB_*``
        credentials, and ``BASE_URL`` over the id/region derived endpoint.
        """
        import os

        env = os.environ if environ is None else environ

        def get_env(*keys: str) -> str | None:
            for key in keys:
                value = env.get(key)
                if value:
                    return value
            return None

        base_url = get_env(ENV_BASE_URL)
        db_id = get_env(ENV_DB_ID)
        region = get_env(ENV_DB_REGION)

        missing: list[str] = []
        if base_url is None:
            if db_id is None:
                missing.append(ENV_DB_ID)
            if region is None:
                missing.append(ENV_DB_REGION)

        username = get_env(ENV_USERNAME, ENV_DB_USERNAME)
        password = get_env(ENV_PASSWORD, ENV_DB_PASSWORD)
        bearer_token = get_env(ENV_APPLICATION_TOKEN)
        if bearer_token is None:
            if username is None:
                missing.append(ENV_DB_USERNAME)
            if password is None:
                missing.append(ENV_DB_PASSWORD)

        if missing:
            msg = f"Missing required environment variables: {', '.join(missing)}"
            raise InvalidConfigError(msg, fields=missing)

        data: dict[str, Any] = {
            "base_url": base_url or database_base_url(db_id or "", region or ""),
            "username": username,
            "password": password,
            "bearer_token": bearer_token,
        }
        ttl = get_env(ENV_TOKEN_TTL)
        if ttl is not None:
            try:
                data["token_ttl"] = float(ttl)
            except ValueError as e:
                msg = f"{ENV_TOKEN_TTL} must be a number of seconds, got {ttl!r}"
                raise InvalidConfigError(msg, fields=[ENV_TOKEN_TTL]) from e

        return cls(**data)
