"""Application layer: use-case services on top of the store."""
