"""Adapters tests."""
