"""Shared helpers used across shadediff modules."""
