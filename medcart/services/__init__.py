"""Shared services (money arithmetic)."""
