"""Utility helpers (logging, contact normalization)."""
