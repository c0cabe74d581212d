"""Compiler adapters."""
