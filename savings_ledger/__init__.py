"""Savings accounts with a device-gated ledger."""
