"""Riftbound product prices and deck tier list."""
