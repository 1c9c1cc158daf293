"""Ephemeral Chain Python SDK."""

__version__ = "0.1.0"

from ephemeral_sdk.client import EphemeralChainClient

__all__ = ["EphemeralChainClient"]
