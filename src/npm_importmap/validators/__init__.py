"""Output validation."""
