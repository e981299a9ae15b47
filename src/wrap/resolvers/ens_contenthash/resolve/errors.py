"""Exceptions raised while resolving an ENS name to a contenthash."""

from typing import Optional


class ResolutionError(Exception):
    """Base class for every failure of a single name resolution."""


class RpcError(ResolutionError):
    """The contract call abstraction reported an error."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


class MalformedResponse(ResolutionError):
    """A contract call succeeded but returned no usable string payload."""


class IncompatibleResolver(ResolutionError):
    """Neither contenthash(bytes32) nor content(bytes32) could be read from a resolver.

    Attributes:
        address: Address of the resolver contract that was queried
    """

    def __init__(self, address: str) -> None:
        super().__init__(f"Incompatible resolver ABI at address {address}")
        self.address = address


class NamehashError(ResolutionError):
    """The domain could not be normalized into a valid label path."""
