"""ENS domain parsing utilities.

Normalizes the path of an ``ens`` URI into a network name and a dot-separated
label path ready for namehashing.
"""

import re
from pydantic import BaseModel

DEFAULT_NETWORK = "mainnet"

URI_SCHEME_PREFIX = "wrap://"
AUTHORITY_PREFIX = "ens/"

_NETWORK_PREFIX = re.compile(r"^([A-Za-z0-9]+)/")


class ParsedDomain(BaseModel):
    """Parsed ENS domain.

    Contains the canonical (lowercase) network key and the label path left
    after removing any scheme, authority and network prefixes.
    """

    network: str
    name: str
    has_network_prefix: bool = False


def strip_uri_prefix(domain: str) -> str:
    """Remove a leading ``wrap://`` scheme and a leading ``ens/`` authority.

    Args:
        domain: Raw domain, e.g. ``wrap://ens/rinkeby/foo.eth``

    Returns:
        The domain with both tokens removed where present
    """
    domain = domain.removeprefix(URI_SCHEME_PREFIX)
    return domain.removeprefix(AUTHORITY_PREFIX)


def parse_domain(domain: str) -> ParsedDomain:
    """Parse an ENS domain into its network and label path.

    A single leading alphanumeric label followed by ``/`` selects the network.
    The label is removed from the domain as written and lowercased to form the
    network key. Without such a label the network is ``mainnet``.

    Args:
        domain: Raw domain, optionally prefixed with ``wrap://ens/`` and a network

    Returns:
        ParsedDomain with network key and remaining name
    """
    domain = strip_uri_prefix(domain)

    match = _NETWORK_PREFIX.match(domain)
    if match is None:
        return ParsedDomain(network=DEFAULT_NETWORK, name=domain)

    return ParsedDomain(
        network=match.group(1).lower(),
        name=domain[match.end() :],
        has_network_prefix=True,
    )
