"""Manage a portfolio of WordPress sites from one console."""

__version__ = "0.3.0"
