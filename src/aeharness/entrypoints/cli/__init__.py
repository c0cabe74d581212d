"""The ``aeharness`` command-line interface."""
