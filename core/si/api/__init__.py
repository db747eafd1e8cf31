"""HTTP API for the model catalog."""
