"""Read-only contract calls.

Defines the contract call abstraction the resolver is driven against and a web3.py backed
implementation that keeps one provider per configured network.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Protocol, Sequence

from aiohttp import ClientTimeout
from eth_utils import to_checksum_address
from web3 import AsyncWeb3
from web3.providers import AsyncHTTPProvider

from wrap.resolvers.ens_contenthash.ethereum.abi import parse_signature

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Connection:
    network: str


@dataclass
class ContractCallResult:
    """Outcome of a contract view call.

    Exactly one of data and error is expected to be set.
    """

    data: Optional[Any] = None
    error: Optional[BaseException] = None


class ContractCaller(Protocol):
    async def call_contract_view(
        self,
        address: str,
        method: str,
        args: Sequence[str],
        connection: Optional[Connection] = None,
    ) -> ContractCallResult: ...


class Web3ContractCaller:
    """Contract caller issuing eth_call requests through web3.py.

    Providers are created lazily per network from the configured RPC endpoints.
    Failures are reported through ContractCallResult.error and never raised.
    """

    def __init__(
        self,
        providers: Mapping[str, str],
        request_timeout: float = 10.0,
        default_network: str = "mainnet",
    ) -> None:
        self._providers = {network.lower(): url for network, url in providers.items()}
        self._request_timeout = request_timeout
        self._default_network = default_network
        self._web3: Dict[str, AsyncWeb3] = {}

    @property
    def networks(self) -> Sequence[str]:
        return list(self._providers.keys())

    def _get_web3(self, network: str) -> AsyncWeb3:
        network = network.lower()
        w3 = self._web3.get(network)
        if w3 is None:
            url = self._providers.get(network)
            if url is None:
                raise ValueError(f"No Ethereum provider configured for network {network}")
            w3 = AsyncWeb3(
                AsyncHTTPProvider(
                    url,
                    request_kwargs={"timeout": ClientTimeout(total=self._request_timeout)},
                )
            )
            self._web3[network] = w3
        return w3

    async def call_contract_view(
        self,
        address: str,
        method: str,
        args: Sequence[str],
        connection: Optional[Connection] = None,
    ) -> ContractCallResult:
        network = connection.network if connection else self._default_network
        try:
            signature = parse_signature(method)
            w3 = self._get_web3(network)
            call_data = signature.encode_call(args)
            raw = await w3.eth.call(
                {"to": to_checksum_address(address), "data": "0x" + call_data.hex()}
            )
            data = signature.decode_output(bytes(raw))
        except Exception as e:
            logger.debug(
                "Contract call %s on %s (%s) failed: %s", method, address, network, e
            )
            return ContractCallResult(error=e)
        return ContractCallResult(data=data)

    async def close(self) -> None:
        for network, w3 in self._web3.items():
            disconnect = getattr(w3.provider, "disconnect", None)
            if disconnect is None:
                continue
            try:
                await disconnect()
            except Exception as e:
                logger.warning(f"Error closing provider for {network}: {e}")
        self._web3.clear()
