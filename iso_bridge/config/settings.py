"""Typed runtime settings with dotenv support and startup validation."""

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from iso_bridge.domain import UnsupportedMessageTypeError, domain_resolve_message_type


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class AppSettings(BaseSettings):
    """Application settings for the payment message codec.

    Environment variable names map directly to field names in uppercase.
    Example: `external_validator_url` reads from `EXTERNAL_VALIDATOR_URL`.

    Attributes:
        environment_name: Runtime environment label.
        log_level: Root logging level for the CLI.
        default_currency: Currency for native amounts and code-less issued amounts.
        default_message_type: Message family used when callers pass none.
        strict_amount_shapes: Reject unrecognized amount shapes instead of mapping them to zero.
        amount_fraction_digits: Fraction digits kept when converting native amounts to major units.
        token_currency_code: Issued token currency accepted by the eligibility filter.
        token_issuer: Issued token issuer accepted by the eligibility filter.
        external_validator_url: Base URL of the external conformance checker; unset disables it.
        external_validator_timeout_seconds: Conformance-check request timeout.
        instructing_agent_id: Proprietary instructing/debtor agent id.
        instructing_agent_bic: Optional instructing/debtor agent BIC.
        instructed_agent_id: Proprietary instructed/creditor agent id.
        instructed_agent_bic: Optional instructed/creditor agent BIC.
        initiating_party_name: `pain.001` initiating party name.
        initiating_party_id: `pain.001` initiating party id.
        pipeline_max_workers: Thread count for batch processing.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment_name: str = Field(default="development")
    log_level: str = Field(default="INFO")
    default_currency: str = Field(default="HCT", min_length=1)
    default_message_type: str = Field(default="pacs.008")
    strict_amount_shapes: bool = Field(default=True)
    amount_fraction_digits: int = Field(default=5, ge=0, le=5)
    token_currency_code: str | None = Field(default=None)
    token_issuer: str | None = Field(default=None)
    external_validator_url: str | None = Field(default=None)
    external_validator_timeout_seconds: float = Field(default=10.0, gt=0)
    instructing_agent_id: str = Field(default="HCTMIDDLEWARE", min_length=1)
    instructing_agent_bic: str | None = Field(default=None)
    instructed_agent_id: str = Field(default="LEDGERNETWORK", min_length=1)
    instructed_agent_bic: str | None = Field(default=None)
    initiating_party_name: str = Field(default="HCT Ledger Middleware", min_length=1)
    initiating_party_id: str = Field(default="HCT_MIDDLEWARE", min_length=1)
    pipeline_max_workers: int = Field(default=4, ge=1)

    @field_validator("default_currency", "instructing_agent_id", "instructed_agent_id")
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value

    @field_validator(
        "token_currency_code",
        "token_issuer",
        "external_validator_url",
        "instructing_agent_bic",
        "instructed_agent_bic",
    )
    @classmethod
    def _validate_optional_string(cls, value: str | None) -> str | None:
        if value is None:
            return None
        stripped_value = value.strip()
        return stripped_value or None

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized_value = value.strip().upper()
        if normalized_value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError("log_level must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return normalized_value

    @field_validator("default_message_type")
    @classmethod
    def _validate_message_type(cls, value: str) -> str:
        try:
            return domain_resolve_message_type(value).value
        except UnsupportedMessageTypeError as error:
            raise ValueError(str(error)) from error

    @model_validator(mode="after")
    def _validate_token_filter_pair(self) -> "AppSettings":
        if bool(self.token_issuer) != bool(self.token_currency_code):
            raise ValueError("token_issuer and token_currency_code must be set together")
        return self


def config_load_settings() -> AppSettings:
    """Load and validate runtime settings from environment and dotenv.

    Returns:
        AppSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when required settings are missing or invalid.
    """

    try:
        return AppSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error
