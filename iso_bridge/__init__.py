"""Ledger payment to ISO 20022 message codec."""
