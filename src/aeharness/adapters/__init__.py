"""Adapters implementing the `aeharness.interfaces` ports.

- `compiler.http` / `node.http`: the external compiler and node services over HTTP.
- `devnet`: an in-process node and compiler pair for running scenarios offline.
- `contract_loader`: reads contract sources and their includes from disk.
- `redactor`: regex-based secret redaction.
"""
