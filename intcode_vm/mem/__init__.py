"""Intcode VM: memory model."""
