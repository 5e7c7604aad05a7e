"""Application layer: use cases and the command-line startup."""
