"""AEHARNESS

A test harness for smart-contract workflows. It loads contract sources,
compiles and deploys them through a node and a compiler service, and drives
entry points from signed client sessions so scenarios can assert on the
decoded results.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
