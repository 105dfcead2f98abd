"""Intcode VM: instruction decoding and command resolution."""
