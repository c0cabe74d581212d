"""Domain layer: addresses, keypairs, artifacts, the contract type model and errors."""
