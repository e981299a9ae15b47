"""
ENS Name Resolution

This package resolves ENS names to contenthash records and maps the result into URI
resolution outcomes.

Key Components:
- domain.py: Domain parsing (scheme and authority stripping, network prefix detection)
- name.py: Namehash computation and the registry/resolver contract lookups
- dispatcher.py: Authority check and outcome mapping for URI resolution pipelines
- errors.py: Resolution error types
- __main__.py: CLI interface for resolution

The resolution flow follows these steps:
1. Strip the wrap:// scheme and ens/ authority from the domain
2. Detect an optional network prefix, defaulting to mainnet
3. Select the registry address for the network
4. Read the resolver address for the namehash from the registry
5. Read contenthash(bytes32) from the resolver, falling back to content(bytes32)
6. Wrap a non-empty result into an ens-contenthash/ successor URI
"""
