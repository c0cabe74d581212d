"""Node adapters."""
