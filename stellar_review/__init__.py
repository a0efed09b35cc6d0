"""Decode Stellar transaction XDR, encode StrKeys and format fields for human review."""

__version__ = "5.0.3"