"""Resource types and helpers for the operators.coreos.com API group."""

__version__ = "0.1.0"