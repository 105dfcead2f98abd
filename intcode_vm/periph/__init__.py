"""Intcode VM: I/O ports."""
