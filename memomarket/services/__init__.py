"""Interop with companion applications."""
