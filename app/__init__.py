"""Task-earning platform backend."""
