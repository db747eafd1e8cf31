"""Si Core - local model catalog and Hugging Face cache reconciliation."""

__version__ = "0.1.0"
