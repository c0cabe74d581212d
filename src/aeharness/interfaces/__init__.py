"""Ports (framework-free interfaces) implemented by the adapters.

Layering rules:
- Modules here may import `aeharness.domain` only.
- Adapters implement these ABCs; the client layer depends on them, never on
  a concrete adapter.
"""
