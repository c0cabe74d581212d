"""Entry points (CLI) for aeharness.

Dependency rule: entry points import `aeharness.bootstrap` for wiring plus the
config and logging helpers; they hold no harness logic of their own.
"""
