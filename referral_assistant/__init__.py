"""Nephrology referral assistant with client-grade PII masking."""

__version__ = "0.1.0"
