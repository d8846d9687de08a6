"""Infrastructure adapters: persistence and command line."""
