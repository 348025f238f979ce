"""Canonical mapping service for ledger-to-ISO 20022 payment records."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from decimal import (
    ROUND_05UP,
    ROUND_CEILING,
    ROUND_DOWN,
    ROUND_FLOOR,
    ROUND_HALF_DOWN,
    ROUND_HALF_EVEN,
    ROUND_HALF_UP,
    ROUND_UP,
    Decimal,
)
from typing import Callable, Final, Mapping
from uuid import uuid4

from iso_bridge.domain import (
    AccountRecord,
    AmountRecord,
    CanonicalPaymentRecord,
    IssuedAmount,
    MessageType,
    PartyRecord,
    PostalAddress,
    RawLedgerTransaction,
    RegulatoryReporting,
    RemittanceInformation,
    domain_ledger_parse_amount,
    domain_resolve_message_type,
)

from .interfaces import KycEnrichment, MalformedAmountError, MemoDecodeError

logger = logging.getLogger(__name__)

MAX_IDENTIFIER_LENGTH: Final[int] = 35
MAX_TEXT_LENGTH: Final[int] = 140
DROPS_PER_UNIT: Final[Decimal] = Decimal(1_000_000)
MAX_AMOUNT_FRACTION_DIGITS: Final[int] = 5
_MAPPING_ROUNDING_MODES: Final[frozenset[str]] = frozenset(
    {ROUND_05UP, ROUND_CEILING, ROUND_DOWN, ROUND_FLOOR, ROUND_HALF_DOWN, ROUND_HALF_EVEN, ROUND_HALF_UP, ROUND_UP}
)

_MAPPING_NATIVE_AMOUNT_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\d+$")
_MAPPING_XML_ILLEGAL_CHARACTERS: Final[re.Pattern[str]] = re.compile(
    r"[^\x09\x0A\x0D\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]"
)


def mapping_default_account_name(identification: str) -> str:
    """Synthesize a placeholder party name from a ledger account identifier.

    Args:
        identification: Ledger account identifier.

    Returns:
        str: `Account_` followed by the first eight identifier characters.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return f"Account_{identification[:8]}"


def _mapping_utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _mapping_random_token() -> str:
    return str(uuid4())


@dataclass(frozen=True)
class MappingServiceConfig:
    """Configuration for canonical mapping behavior.

    Attributes:
        default_currency: Currency used for native amounts and issued amounts without a code.
        charge_bearer: Fixed charge bearer code.
        purpose_code: Fixed purpose code for digital-asset transfers.
        strict_amount_shapes: Raise on unrecognized amount shapes instead of mapping them to `"0"`.
        amount_fraction_digits: Maximum fraction digits of converted native amounts.
        amount_rounding: `decimal` rounding mode applied when a native amount has more fraction digits.
        account_name_resolver: Resolver from account identifier to party name.
        clock: UTC clock used for `creation_date_time`.
        token_provider: Random token source used when a transaction has no hash.
    """

    default_currency: str = "HCT"
    charge_bearer: str = "SLEV"
    purpose_code: str = "CBFF"
    strict_amount_shapes: bool = True
    amount_fraction_digits: int = MAX_AMOUNT_FRACTION_DIGITS
    amount_rounding: str = ROUND_HALF_EVEN
    account_name_resolver: Callable[[str], str] = mapping_default_account_name
    clock: Callable[[], datetime] = _mapping_utc_now
    token_provider: Callable[[], str] = _mapping_random_token

    def mapping_validate(self) -> None:
        """Validate mapping configuration values.

        Returns:
            None: This method does not return a value.

        Raises:
            ValueError: Raised when configured defaults are invalid.
        """

        if not self.default_currency.strip():
            raise ValueError("config.default_currency must not be blank")
        if not self.charge_bearer.strip():
            raise ValueError("config.charge_bearer must not be blank")
        if not 0 <= self.amount_fraction_digits <= MAX_AMOUNT_FRACTION_DIGITS:
            raise ValueError(f"config.amount_fraction_digits must be between 0 and {MAX_AMOUNT_FRACTION_DIGITS}")
        if self.amount_rounding not in _MAPPING_ROUNDING_MODES:
            raise ValueError(f"config.amount_rounding must be a decimal rounding mode, got {self.amount_rounding!r}")


class CanonicalMappingService:
    """Concrete mapping service turning ledger payments into canonical records."""

    def __init__(self, config: MappingServiceConfig | None = None):
        """Initialize canonical mapping service.

        Args:
            config: Optional mapping configuration values.

        Returns:
            None: Initializer does not return values.

        Raises:
            ValueError: Raised when config values are invalid.
        """

        resolved_config = config or MappingServiceConfig()
        resolved_config.mapping_validate()

        self._config = resolved_config

    def mapping_map_transaction(
        self,
        transaction: RawLedgerTransaction,
        message_type: MessageType | str = MessageType.FI_TO_FI_CREDIT_TRANSFER,
    ) -> CanonicalPaymentRecord:
        """Map one raw ledger transaction into a canonical payment record.

        Identifiers are derived from the transaction hash, so mapping the same
        transaction twice yields identical identifiers and amounts. Only
        `creation_date_time` depends on the clock.

        Args:
            transaction: Raw ledger transaction.
            message_type: Target message family.

        Returns:
            CanonicalPaymentRecord: Canonical record with pre-truncated, sanitized fields.

        Raises:
            MalformedAmountError: Raised when the amount is absent or unrecognized in strict mode.
            MemoDecodeError: Raised when the first memo payload cannot be decoded.
            UnsupportedMessageTypeError: Raised when `message_type` is not supported.
        """

        resolved_message_type = domain_resolve_message_type(message_type)
        identifier = self.mapping_generate_identifier(transaction.transaction_hash)
        amount_value = self.mapping_extract_amount(transaction.amount)
        currency = self.mapping_extract_currency(transaction.amount)

        record = CanonicalPaymentRecord(
            message_id=identifier,
            instruction_id=identifier,
            end_to_end_id=identifier,
            transaction_id=identifier,
            creation_date_time=self._mapping_creation_date_time(),
            number_of_transactions="1",
            control_sum=amount_value,
            instructed_amount=AmountRecord(currency=currency, value=amount_value),
            debtor=self._mapping_build_party(transaction.account),
            debtor_account=AccountRecord(identification=_mapping_sanitize_text(transaction.account), currency=currency),
            creditor=self._mapping_build_party(transaction.destination),
            creditor_account=AccountRecord(
                identification=_mapping_sanitize_text(transaction.destination),
                currency=currency,
            ),
            remittance_information=RemittanceInformation(
                unstructured=self._mapping_build_remittance_text(transaction, currency, identifier)
            ),
            charge_bearer=self._config.charge_bearer,
            purpose_code=self._config.purpose_code,
            source_transaction_hash=transaction.transaction_hash,
        )
        logger.info(
            "Mapped ledger transaction %s to %s canonical record",
            transaction.transaction_hash or identifier,
            resolved_message_type.value,
        )
        return record

    def mapping_generate_identifier(self, seed: str | None) -> str:
        """Derive an ISO identifier from a seed string.

        Args:
            seed: Transaction hash, or None/blank to use a fresh random token.

        Returns:
            str: Seed without `-` characters, capped at 35 characters.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        identifier = _mapping_clean_identifier(seed or "")
        if not identifier:
            identifier = _mapping_clean_identifier(self._config.token_provider())
        return identifier

    def mapping_extract_amount(self, amount: object | None) -> str:
        """Extract the major-unit decimal amount text from a ledger amount.

        Native amounts are divided by one million and rounded to at most
        `amount_fraction_digits` fraction digits with `amount_rounding`, so a
        drop count that is not a multiple of ten still renders a valid ISO
        amount. Issued amounts pass through unchanged.

        Args:
            amount: Native-unit integer string, `IssuedAmount`, or a raw
                `{currency, value, issuer}` mapping.

        Returns:
            str: Decimal amount text in major units.

        Raises:
            MalformedAmountError: Raised when amount is absent, or has an unrecognized
                shape while strict amount shapes are enabled.
        """

        amount = _mapping_coerce_amount(amount)
        if amount is None:
            raise MalformedAmountError("transaction amount is missing")
        if isinstance(amount, IssuedAmount):
            return amount.value
        if isinstance(amount, str) and _MAPPING_NATIVE_AMOUNT_PATTERN.match(amount):
            return self._mapping_format_native_amount(Decimal(amount) / DROPS_PER_UNIT)

        if self._config.strict_amount_shapes:
            raise MalformedAmountError(f"unrecognized transaction amount shape: {amount!r}")
        logger.warning("Unrecognized amount shape %r mapped to 0", amount)
        return "0"

    def mapping_extract_currency(self, amount: object | None) -> str:
        amount = _mapping_coerce_amount(amount)
        if isinstance(amount, IssuedAmount) and amount.currency:
            return amount.currency
        return self._config.default_currency

    def _mapping_format_native_amount(self, major_units: Decimal) -> str:
        fraction_digits = self._config.amount_fraction_digits
        if -major_units.as_tuple().exponent > fraction_digits:
            rounded_units = major_units.quantize(
                Decimal(1).scaleb(-fraction_digits),
                rounding=self._config.amount_rounding,
            )
            logger.debug("Rounded native amount %s to %s", major_units, rounded_units)
            major_units = rounded_units.normalize()
        return format(major_units, "f")

    def mapping_decode_memo(self, transaction: RawLedgerTransaction) -> str | None:
        """Decode the first memo payload as UTF-8 text.

        Args:
            transaction: Raw ledger transaction.

        Returns:
            str | None: Decoded memo text, or None when no memo payload exists.

        Raises:
            MemoDecodeError: Raised when the payload is not hex or not UTF-8.
        """

        if not transaction.memos:
            return None
        memo_data = transaction.memos[0].memo_data
        if not memo_data:
            return None

        try:
            return bytes.fromhex(memo_data).decode("utf-8")
        except ValueError as error:
            raise MemoDecodeError(
                f"memo payload of transaction {transaction.transaction_hash or '<unhashed>'} could not be decoded"
            ) from error

    def _mapping_build_remittance_text(
        self,
        transaction: RawLedgerTransaction,
        currency: str,
        identifier: str,
    ) -> str:
        memo_text = _mapping_sanitize_text(self.mapping_decode_memo(transaction) or "")
        if memo_text.strip():
            return memo_text
        reference = transaction.transaction_hash or identifier
        return _mapping_sanitize_text(f"{currency} Transfer - {reference}")

    def _mapping_build_party(self, identification: str) -> PartyRecord:
        sanitized_identification = _mapping_sanitize_text(identification)
        resolved_name = self._config.account_name_resolver(sanitized_identification) or "Unknown"
        return PartyRecord(
            name=_mapping_sanitize_text(resolved_name),
            identification=sanitized_identification,
            address=mapping_build_placeholder_address(sanitized_identification),
        )

    def _mapping_creation_date_time(self) -> str:
        now_utc = self._config.clock().astimezone(timezone.utc)
        return now_utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def mapping_build_placeholder_address(identification: str) -> PostalAddress:
    """Build the fixed-shape postal placeholder for a ledger account.

    Args:
        identification: Ledger account identifier, used as street name.

    Returns:
        PostalAddress: Placeholder address with sentinel country `XX`.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return PostalAddress(
        address_type="ADDR",
        department="LEDGER",
        street_name=identification[:70],
        building_number="1",
        post_code="00000",
        town_name="Digital",
        country="XX",
    )


def mapping_is_token_payment(
    transaction: RawLedgerTransaction,
    currency_code: str,
    issuer: str,
) -> bool:
    """Return whether a transaction is a payment in the configured issued token.

    Args:
        transaction: Raw ledger transaction.
        currency_code: Token currency code.
        issuer: Token issuer account.

    Returns:
        bool: True for `Payment` transactions carrying the token as issued amount.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    amount = _mapping_coerce_amount(transaction.amount)
    return (
        transaction.transaction_type == "Payment"
        and isinstance(amount, IssuedAmount)
        and amount.currency == currency_code
        and amount.issuer == issuer
    )


def mapping_apply_kyc_enrichment(
    record: CanonicalPaymentRecord,
    kyc: KycEnrichment | None,
) -> CanonicalPaymentRecord:
    """Attach KYC/AML attributes to a canonical record.

    Args:
        record: Canonical record produced by the mapper.
        kyc: Compliance attributes, or None to leave the record unchanged.

    Returns:
        CanonicalPaymentRecord: New record carrying regulatory reporting and party attributes.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if kyc is None:
        return record

    return replace(
        record,
        regulatory_reporting=RegulatoryReporting(authority=kyc.authority or "LOCAL", details=dict(kyc.details)),
        debtor=replace(
            record.debtor,
            date_of_birth=kyc.debtor_date_of_birth,
            country_of_residence=kyc.debtor_country,
        ),
        creditor=replace(
            record.creditor,
            date_of_birth=kyc.creditor_date_of_birth,
            country_of_residence=kyc.creditor_country,
        ),
    )


def _mapping_coerce_amount(amount: object | None) -> object | None:
    if isinstance(amount, Mapping):
        return domain_ledger_parse_amount(amount)
    return amount


def _mapping_clean_identifier(value: str) -> str:
    return _mapping_strip_xml_illegal(value.replace("-", ""))[:MAX_IDENTIFIER_LENGTH]


def _mapping_sanitize_text(value: str) -> str:
    return _mapping_strip_xml_illegal(value)[:MAX_TEXT_LENGTH]


def _mapping_strip_xml_illegal(value: str) -> str:
    return _MAPPING_XML_ILLEGAL_CHARACTERS.sub("", value)


__all__ = [
    "CanonicalMappingService",
    "DROPS_PER_UNIT",
    "MAX_AMOUNT_FRACTION_DIGITS",
    "MAX_IDENTIFIER_LENGTH",
    "MAX_TEXT_LENGTH",
    "MappingServiceConfig",
    "mapping_apply_kyc_enrichment",
    "mapping_build_placeholder_address",
    "mapping_default_account_name",
    "mapping_is_token_payment",
]
