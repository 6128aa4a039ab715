"""Shared helpers used across Track Rules modules."""
