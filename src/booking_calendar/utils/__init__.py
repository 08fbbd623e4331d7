"""Utility helpers for dates and logging."""
