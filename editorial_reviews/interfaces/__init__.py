"""Abstract contracts for review sources and the persisted key-value store."""
