"""Relational schema of the clinic booking system."""

__version__ = "0.1.0"
