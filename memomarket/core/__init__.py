"""Wiring of stores to the configuration root and shared diagnostics."""
