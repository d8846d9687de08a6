"""Database engine, schema and connection handle."""
