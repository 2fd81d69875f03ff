"""Menu-bar style quick notes: plain-text documents with a durable recent list."""

__version__ = "0.1.0"
