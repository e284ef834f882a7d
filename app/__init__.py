"""Burn monitor application package."""
