"""AEHARNESS test suite.

Folder taxonomy
- unit/         : Isolated, fast checks of a single module/class/function.
- contract/     : Contract behaviour checked against every node/compiler backend.
- integration/  : Several components wired together (devnet sessions, bootstrap,
                  HTTP adapters against fake services).
- functional/   : User-visible CLI flows tested end-to-end at the boundary.
- fixtures/     : Shared fixtures registered through `pytest_plugins`.
- helpers/      : Shared utilities (no tests here).

General guidance
- Keep unit fast and deterministic (no real I/O); prefer the devnet and fakes
  over mocks at boundaries.
- The `http` backend runs only when a live node and compiler are configured.
- Functional asserts user-observable results, not internals.
- Property-based tests live with the layer they exercise and use @pytest.mark.property.
- Markers: unit, integration, functional, contract, property, slow, http
"""
