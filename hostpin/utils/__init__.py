"""Utility modules for hostpin."""
