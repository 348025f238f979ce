"""Application bootstrap wiring for startup validation and dependency assembly."""

from iso_bridge.adapters import HttpConformanceClient
from iso_bridge.config import AppSettings, config_load_settings
from iso_bridge.jobs import PaymentMessagePipeline, PaymentPipelineConfig
from iso_bridge.mapping import CanonicalMappingService, MappingServiceConfig
from iso_bridge.serialization import Iso20022XmlSerializer, SerializerConfig
from iso_bridge.validation import Iso20022ValidationService, validation_build_default_rule_table


def bootstrap_create_validator(settings: AppSettings | None = None) -> Iso20022ValidationService:
    """Build the validator with the default rule table and optional conformance checker.

    Args:
        settings: Optional pre-loaded settings; loaded from the environment when omitted.

    Returns:
        Iso20022ValidationService: Fully wired validator.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    conformance_client = None
    if resolved_settings.external_validator_url:
        conformance_client = HttpConformanceClient(
            base_url=resolved_settings.external_validator_url,
            timeout_seconds=resolved_settings.external_validator_timeout_seconds,
        )
    return Iso20022ValidationService(
        rule_table=validation_build_default_rule_table(),
        conformance_client=conformance_client,
    )


def bootstrap_create_pipeline(settings: AppSettings | None = None) -> PaymentMessagePipeline:
    """Assemble the payment pipeline after validating startup configuration.

    Args:
        settings: Optional pre-loaded settings; loaded from the environment when omitted.

    Returns:
        PaymentMessagePipeline: Fully wired mapper, serializer and validator pipeline.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    mapping_service = CanonicalMappingService(
        config=MappingServiceConfig(
            default_currency=resolved_settings.default_currency,
            strict_amount_shapes=resolved_settings.strict_amount_shapes,
            amount_fraction_digits=resolved_settings.amount_fraction_digits,
        )
    )
    serializer = Iso20022XmlSerializer(
        config=SerializerConfig(
            instructing_agent_id=resolved_settings.instructing_agent_id,
            instructing_agent_bic=resolved_settings.instructing_agent_bic,
            instructed_agent_id=resolved_settings.instructed_agent_id,
            instructed_agent_bic=resolved_settings.instructed_agent_bic,
            initiating_party_name=resolved_settings.initiating_party_name,
            initiating_party_id=resolved_settings.initiating_party_id,
        )
    )
    return PaymentMessagePipeline(
        mapping_service=mapping_service,
        serializer=serializer,
        validator=bootstrap_create_validator(resolved_settings),
        config=PaymentPipelineConfig(
            token_currency_code=resolved_settings.token_currency_code,
            token_issuer=resolved_settings.token_issuer,
            max_workers=resolved_settings.pipeline_max_workers,
        ),
    )
