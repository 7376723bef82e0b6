"""Sifter: due-diligence risk scoring for crypto projects."""

__version__ = "0.1.0"
