"""Shared test helpers for zcc."""
