"""Sanitizing subprocess proxy for the Sui and Walrus command-line tools."""

__version__ = "0.1.0"
