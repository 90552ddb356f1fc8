"""Expiration payoff, metrics and risk triage for multi-leg option strategies."""

__version__ = "0.1.0"
