"""Options trade reconciliation engine and service."""
