"""HTTP API for the inventory ledger."""
