"""Redactors tests."""
