"""
Ethereum Integration

This package provides the read-only contract call abstraction used by the resolver.

Key Components:
- abi.py: Human-readable function signature parsing, call data encoding and return data decoding
- client.py: ContractCaller protocol, call result type and the web3.py backed implementation

Calls are scoped to a network. Each configured network maps to one JSON-RPC endpoint, and an
unknown network is reported as a failed call rather than raised.
"""
