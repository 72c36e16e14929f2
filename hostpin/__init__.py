"""hostpin: trust-on-first-use SSH host key verification."""

__version__ = "0.1.0"
