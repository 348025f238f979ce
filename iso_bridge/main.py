"""Main module entrypoint for local codec execution.

`convert` maps a ledger transaction JSON file to an ISO 20022 document and
validates it; `validate` re-validates an existing document.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from iso_bridge.bootstrap import bootstrap_create_pipeline
from iso_bridge.config import AppSettings, config_load_settings
from iso_bridge.domain import domain_ledger_parse_transaction
from iso_bridge.validation import ValidationResult

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    """Run selected codec command with validated startup configuration.

    Args:
        argv: Optional argument list; defaults to process arguments.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
        SystemExit: Raised with status 1 for invalid documents and 2 for unusable input.
    """

    argument_parser = argparse.ArgumentParser(description="Ledger payment to ISO 20022 codec")
    argument_parser.add_argument(
        "command",
        choices=("convert", "validate"),
        help="`convert` renders a ledger transaction JSON file, `validate` checks an XML document",
        type=str,
    )
    argument_parser.add_argument("path", type=Path, help="Input file: transaction JSON or XML document")
    argument_parser.add_argument(
        "--message-type",
        dest="message_type",
        type=str,
        help="Message family selector (`pacs.008` or `pain.001`); defaults to DEFAULT_MESSAGE_TYPE",
    )
    argument_parser.add_argument(
        "--output",
        dest="output",
        type=Path,
        help="Optional file receiving the generated XML for `convert`",
    )
    parsed_arguments = argument_parser.parse_args(argv)

    settings = config_load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    message_type = parsed_arguments.message_type or settings.default_message_type

    try:
        if parsed_arguments.command == "convert":
            validation_result = main_convert(
                settings=settings,
                transaction_path=parsed_arguments.path,
                message_type=message_type,
                output_path=parsed_arguments.output,
            )
        else:
            validation_result = main_validate(
                settings=settings,
                document_path=parsed_arguments.path,
                message_type=message_type,
            )
    except (OSError, ValueError) as error:
        logger.error("Command %s failed: %s", parsed_arguments.command, error)
        raise SystemExit(2) from error

    if not validation_result.is_valid:
        raise SystemExit(1)


def main_convert(
    settings: AppSettings,
    transaction_path: Path,
    message_type: str,
    output_path: Path | None = None,
) -> ValidationResult:
    """Convert one ledger transaction file and print or store the document.

    Args:
        settings: Validated runtime settings.
        transaction_path: JSON file holding one ledger transaction.
        message_type: Message family selector.
        output_path: Optional destination for the XML document.

    Returns:
        ValidationResult: Validation outcome of the generated document.

    Raises:
        OSError: Raised when files cannot be read or written.
        ValueError: Raised when the file is not a usable transaction payload.
    """

    payload = json.loads(transaction_path.read_text(encoding="utf-8"))
    if isinstance(payload, dict) and isinstance(payload.get("result"), dict):
        payload = payload["result"]
    transaction = domain_ledger_parse_transaction(payload)

    pipeline = bootstrap_create_pipeline(settings)
    pipeline_result = pipeline.job_process_transaction(transaction, message_type)

    if output_path is not None:
        output_path.write_text(pipeline_result.xml_document, encoding="utf-8")
    else:
        sys.stdout.write(pipeline_result.xml_document)
    main_print_validation_summary(pipeline_result.validation_result, stream=sys.stderr)
    return pipeline_result.validation_result


def main_validate(settings: AppSettings, document_path: Path, message_type: str) -> ValidationResult:
    """Validate one stored XML document and print the summary.

    Args:
        settings: Validated runtime settings.
        document_path: XML document file.
        message_type: Message family selector.

    Returns:
        ValidationResult: Validation outcome.

    Raises:
        OSError: Raised when the file cannot be read.
    """

    pipeline = bootstrap_create_pipeline(settings)
    validation_result = pipeline.job_revalidate(document_path.read_text(encoding="utf-8"), message_type)
    main_print_validation_summary(validation_result, stream=sys.stdout)
    return validation_result


def main_print_validation_summary(validation_result: ValidationResult, stream) -> None:
    stream.write(json.dumps(validation_result.to_dict(), indent=2))
    stream.write("\n")


if __name__ == "__main__":
    main()
