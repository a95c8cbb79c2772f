"""Data access layer: abstract DAO interfaces and their Redis implementations."""
