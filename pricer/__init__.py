"""Binary-protocol option pricer daemon."""

__version__ = "0.1.0"
