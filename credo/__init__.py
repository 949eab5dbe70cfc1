"""Credo: account signup, activation, login and password reset service."""

__version__ = "0.1.0"
