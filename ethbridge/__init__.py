"""Ethereum JSON-RPC types, bloom-based log filtering and a block-mapping database."""

__version__ = "0.1.0"