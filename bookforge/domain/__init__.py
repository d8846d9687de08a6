"""Domain layer: entities, error kinds and repository contracts."""
