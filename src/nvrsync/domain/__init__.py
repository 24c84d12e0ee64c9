"""Domain layer: model, reconciliation engine, progress ledger and ports."""
