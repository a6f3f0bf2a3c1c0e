"""Repo Compliance: audit repositories against compliance checks."""

__version__ = "0.1.0"
