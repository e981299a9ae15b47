"""ENS name to contenthash resolution.

Resolves an ENS domain by reading the resolver address for its namehash from the ENS registry,
then reading the contenthash record from that resolver. Resolvers that predate the contenthash
interface are read through the legacy content(bytes32) method instead.
"""

import logging
from typing import Dict, Mapping, Optional, Union

from ens import ENS
from ens.exceptions import InvalidName
from pydantic import BaseModel, ConfigDict, Field

from wrap.resolvers.ens_contenthash.ethereum.client import Connection, ContractCaller
from wrap.resolvers.ens_contenthash.resolve.domain import parse_domain
from wrap.resolvers.ens_contenthash.resolve.errors import (
    IncompatibleResolver,
    MalformedResponse,
    NamehashError,
    ResolutionError,
    RpcError,
)

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY_ADDRESS = "0x00000000000C2E074eC69A0dFb2997BA6C7d2e1e"

REGISTRY_RESOLVER = "function resolver(bytes32 node) external view returns (address)"
RESOLVER_CONTENTHASH = "function contenthash(bytes32 nodehash) view returns (bytes)"
RESOLVER_CONTENT = "function content(bytes32 nodehash) view returns (bytes32)"

# ABI encoding of an empty bytes value
EMPTY_CONTENTHASH = "0x"


class AddressTable(BaseModel):
    """Registry contract address per network, keyed by lowercase network name."""

    model_config = ConfigDict(frozen=True)

    addresses: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_mapping(cls, addresses: Optional[Mapping[str, str]]) -> "AddressTable":
        """Build a table from a caller supplied mapping, copying entries one by one."""
        copied: Dict[str, str] = {}
        for network, address in (addresses or {}).items():
            copied[network.lower()] = address
        return cls(addresses=copied)

    def get(self, network: str) -> Optional[str]:
        return self.addresses.get(network.lower())


def namehash(name: str) -> str:
    """Compute the ENS namehash of a dot-separated label path.

    Args:
        name: ENS name such as ``vitalik.eth``

    Returns:
        0x-prefixed hex encoding of the 32 byte node

    Raises:
        NamehashError: If the name cannot be normalized
    """
    try:
        node = ENS.namehash(name)
    except InvalidName as e:
        raise NamehashError(f"Invalid ENS name {name!r}: {e}") from e
    return "0x" + bytes(node).hex()


class NameResolver:
    """Resolve ENS domains to contenthash strings.

    Each resolve call performs two sequential contract reads: the registry lookup of the
    resolver address, then the contenthash lookup on that resolver (with one legacy fallback).
    No state is shared between calls beyond the read-only address table.
    """

    def __init__(
        self,
        caller: ContractCaller,
        addresses: Union[AddressTable, Mapping[str, str], None] = None,
        default_address: str = DEFAULT_REGISTRY_ADDRESS,
    ) -> None:
        self._caller = caller
        self.addresses = addresses
        self._default_address = default_address

    @property
    def addresses(self) -> AddressTable:
        return self._addresses

    @addresses.setter
    def addresses(self, addresses: Union[AddressTable, Mapping[str, str], None]) -> None:
        if isinstance(addresses, AddressTable):
            self._addresses = addresses
        else:
            self._addresses = AddressTable.from_mapping(addresses)

    def registry_address(self, network: str) -> str:
        """Registry address for a network, the configured override or the default."""
        return self._addresses.get(network) or self._default_address

    async def resolve(self, domain: str) -> str:
        """Resolve a domain to its contenthash.

        Args:
            domain: ENS domain, optionally prefixed with ``wrap://ens/`` and a network label

        Returns:
            The raw contenthash hex string, or an empty string when the record is empty

        Raises:
            NamehashError: If the domain is not a valid ENS name
            RpcError: If the registry lookup fails
            MalformedResponse: If the registry lookup returns no usable payload
            IncompatibleResolver: If neither contenthash nor content can be read
        """
        parsed = parse_domain(domain)
        registry = self.registry_address(parsed.network)
        node = namehash(parsed.name)
        connection = Connection(network=parsed.network)

        logger.debug(
            "Resolving %s on %s using registry %s", parsed.name, parsed.network, registry
        )

        resolver_address = await self._call_view(
            registry, REGISTRY_RESOLVER, node, connection
        )

        try:
            contenthash = await self._call_view(
                resolver_address, RESOLVER_CONTENTHASH, node, connection
            )
        except ResolutionError as e:
            logger.debug(
                "contenthash() failed on resolver %s, trying content(): %s",
                resolver_address,
                e,
            )
            try:
                contenthash = await self._call_view(
                    resolver_address, RESOLVER_CONTENT, node, connection
                )
            except ResolutionError as err:
                raise IncompatibleResolver(resolver_address) from err

        if contenthash == EMPTY_CONTENTHASH:
            return ""

        return contenthash

    async def _call_view(
        self, address: str, method: str, node: str, connection: Connection
    ) -> str:
        try:
            result = await self._caller.call_contract_view(
                address, method, [node], connection
            )
        except Exception as e:
            raise RpcError(f"Contract call to {address} raised: {e}", e) from e

        if result.error is not None:
            raise RpcError(str(result.error), result.error)

        if not result.data:
            raise MalformedResponse(
                f"Contract call to {address} returned nothing.\n"
                f"Data: {result.data}\nError: {result.error}"
            )

        if not isinstance(result.data, str):
            raise MalformedResponse(
                f"Malformed data returned from contract call to {address}: {result.data!r}"
            )

        return result.data
