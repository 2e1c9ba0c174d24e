"""On-disk artifacts and the run ledger."""
