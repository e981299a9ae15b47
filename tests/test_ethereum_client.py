"""
Unit tests for the web3.py contract caller in wrap.resolvers.ens_contenthash.ethereum.client

Tests cover provider selection per network, eth_call request construction, result decoding and
the conversion of every failure into an error result.
"""

import pytest
from unittest.mock import AsyncMock, Mock, patch
from aiohttp import ClientTimeout
from eth_abi import encode
from eth_utils import to_checksum_address

from wrap.resolvers.ens_contenthash.ethereum.client import (
    Connection,
    ContractCallResult,
    Web3ContractCaller,
)
from wrap.resolvers.ens_contenthash.resolve.name import (
    REGISTRY_RESOLVER,
    RESOLVER_CONTENTHASH,
)

from tests.test_helpers import DEFAULT_REGISTRY, NAMEHASH_FOO_ETH, RESOLVER

PROVIDERS = {
    "mainnet": "https://mainnet.example.com",
    "Rinkeby": "https://rinkeby.example.com",
}


@pytest.fixture
def mock_web3():
    with patch(
        "wrap.resolvers.ens_contenthash.ethereum.client.AsyncWeb3"
    ) as mock_web3_class, patch(
        "wrap.resolvers.ens_contenthash.ethereum.client.AsyncHTTPProvider"
    ) as mock_provider_class:
        mock_w3 = Mock()
        mock_w3.eth.call = AsyncMock()
        mock_w3.provider.disconnect = AsyncMock()
        mock_web3_class.return_value = mock_w3
        yield mock_web3_class, mock_provider_class, mock_w3


class TestContractCallResult:
    """Test suite for ContractCallResult defaults."""

    def test_defaults(self):
        result = ContractCallResult()
        assert result.data is None
        assert result.error is None


class TestWeb3ContractCaller:
    """Test suite for Web3ContractCaller."""

    def test_networks_lowercased(self):
        caller = Web3ContractCaller(PROVIDERS)
        assert list(caller.networks) == ["mainnet", "rinkeby"]

    @pytest.mark.asyncio
    async def test_call_registry(self, mock_web3):
        """The call is encoded, sent as eth_call and the address decoded."""
        _, mock_provider_class, mock_w3 = mock_web3
        mock_w3.eth.call.return_value = encode(["address"], [RESOLVER.lower()])

        caller = Web3ContractCaller(PROVIDERS, request_timeout=3.0)
        result = await caller.call_contract_view(
            DEFAULT_REGISTRY, REGISTRY_RESOLVER, [NAMEHASH_FOO_ETH], Connection("mainnet")
        )

        assert result.error is None
        assert result.data == to_checksum_address(RESOLVER)
        mock_provider_class.assert_called_once_with(
            "https://mainnet.example.com", request_kwargs={"timeout": ClientTimeout(total=3.0)}
        )
        mock_w3.eth.call.assert_called_once_with(
            {
                "to": to_checksum_address(DEFAULT_REGISTRY),
                "data": "0x0178b8bf" + NAMEHASH_FOO_ETH[2:],
            }
        )

    @pytest.mark.asyncio
    async def test_call_contenthash_empty(self, mock_web3):
        _, _, mock_w3 = mock_web3
        mock_w3.eth.call.return_value = encode(["bytes"], [b""])

        caller = Web3ContractCaller(PROVIDERS)
        result = await caller.call_contract_view(
            RESOLVER, RESOLVER_CONTENTHASH, [NAMEHASH_FOO_ETH]
        )

        assert result.data == "0x"

    @pytest.mark.asyncio
    async def test_default_network(self, mock_web3):
        _, mock_provider_class, mock_w3 = mock_web3
        mock_w3.eth.call.return_value = encode(["address"], [RESOLVER.lower()])

        caller = Web3ContractCaller(PROVIDERS)
        await caller.call_contract_view(
            DEFAULT_REGISTRY, REGISTRY_RESOLVER, [NAMEHASH_FOO_ETH]
        )

        assert mock_provider_class.call_args.args[0] == "https://mainnet.example.com"

    @pytest.mark.asyncio
    async def test_network_is_case_insensitive(self, mock_web3):
        _, mock_provider_class, mock_w3 = mock_web3
        mock_w3.eth.call.return_value = encode(["address"], [RESOLVER.lower()])

        caller = Web3ContractCaller(PROVIDERS)
        result = await caller.call_contract_view(
            DEFAULT_REGISTRY, REGISTRY_RESOLVER, [NAMEHASH_FOO_ETH], Connection("RINKEBY")
        )

        assert result.error is None
        assert mock_provider_class.call_args.args[0] == "https://rinkeby.example.com"

    @pytest.mark.asyncio
    async def test_provider_cached(self, mock_web3):
        mock_web3_class, _, mock_w3 = mock_web3
        mock_w3.eth.call.return_value = encode(["address"], [RESOLVER.lower()])

        caller = Web3ContractCaller(PROVIDERS)
        for _ in range(3):
            await caller.call_contract_view(
                DEFAULT_REGISTRY, REGISTRY_RESOLVER, [NAMEHASH_FOO_ETH]
            )

        mock_web3_class.assert_called_once()
        assert mock_w3.eth.call.call_count == 3

    @pytest.mark.asyncio
    async def test_unknown_network(self, mock_web3):
        """An unconfigured network is a failed call, not an exception."""
        mock_web3_class, _, _ = mock_web3

        caller = Web3ContractCaller(PROVIDERS)
        result = await caller.call_contract_view(
            DEFAULT_REGISTRY, REGISTRY_RESOLVER, [NAMEHASH_FOO_ETH], Connection("goerli")
        )

        assert result.data is None
        assert isinstance(result.error, ValueError)
        assert "goerli" in str(result.error)
        mock_web3_class.assert_not_called()

    @pytest.mark.asyncio
    async def test_call_raises(self, mock_web3):
        _, _, mock_w3 = mock_web3
        mock_w3.eth.call.side_effect = ConnectionError("connection refused")

        caller = Web3ContractCaller(PROVIDERS)
        result = await caller.call_contract_view(
            DEFAULT_REGISTRY, REGISTRY_RESOLVER, [NAMEHASH_FOO_ETH]
        )

        assert result.data is None
        assert isinstance(result.error, ConnectionError)

    @pytest.mark.asyncio
    async def test_no_return_data(self, mock_web3):
        """Calling a function the contract lacks returns no data and fails to decode."""
        _, _, mock_w3 = mock_web3
        mock_w3.eth.call.return_value = b""

        caller = Web3ContractCaller(PROVIDERS)
        result = await caller.call_contract_view(
            RESOLVER, RESOLVER_CONTENTHASH, [NAMEHASH_FOO_ETH]
        )

        assert result.data is None
        assert result.error is not None

    @pytest.mark.asyncio
    async def test_invalid_signature(self, mock_web3):
        caller = Web3ContractCaller(PROVIDERS)
        result = await caller.call_contract_view(RESOLVER, "resolver", [NAMEHASH_FOO_ETH])

        assert isinstance(result.error, ValueError)

    @pytest.mark.asyncio
    async def test_close(self, mock_web3):
        _, _, mock_w3 = mock_web3
        mock_w3.eth.call.return_value = encode(["address"], [RESOLVER.lower()])

        caller = Web3ContractCaller(PROVIDERS)
        await caller.call_contract_view(
            DEFAULT_REGISTRY, REGISTRY_RESOLVER, [NAMEHASH_FOO_ETH]
        )
        await caller.close()

        mock_w3.provider.disconnect.assert_called_once()

    @pytest.mark.asyncio
    async def test_close_without_calls(self):
        caller = Web3ContractCaller(PROVIDERS)
        await caller.close()
