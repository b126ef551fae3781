"""Pack repository interface and its JSON-directory implementation."""
