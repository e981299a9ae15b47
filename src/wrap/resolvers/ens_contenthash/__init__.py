"""
ENS Contenthash URI Resolver

This module implements a URI resolver stage that turns ENS names into content addresses. Given a URI
authority and path, it either declines the URI or produces a successor URI of the form
``ens-contenthash/<contenthash>`` which later stages of a URI-resolution pipeline resolve further.

Key Components:
- resolve: Domain parsing, namehash computation, registry and resolver contract lookups
- ethereum: Read-only contract call abstraction backed by web3.py
- app: Web application layer exposing the resolver over HTTP

Architecture Overview:
1. Domain Normalization:
   - Strips the wrap:// scheme and ens/ authority tokens
   - Detects an optional network prefix (e.g. rinkeby/foo.eth)

2. Contract Resolution:
   - Looks up the resolver address for the namehash in the ENS registry
   - Reads the contenthash record, falling back to the legacy content record

3. Outcome Mapping:
   - Authority mismatches are declined without network activity
   - Resolution failures are reported as unresolved, never as errors
"""
