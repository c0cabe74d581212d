"""Devnet tests."""
