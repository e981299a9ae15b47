"""
Configuration Module

This module defines the configuration for the ENS contenthash resolver service, using Pydantic for
settings validation and dependency injection through AppKeys.

The Settings class is loaded from environment variables with defaults suitable for development.
Application components access settings and shared resources through typed AppKeys.

Key configuration areas include:
- Service networking and error reporting
- ENS registry address overrides per network
- Ethereum JSON-RPC endpoints per network
- Metrics collection
"""

import re
from typing import Dict, Final, Optional
import logging
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from aiohttp import web

from wrap.resolvers.ens_contenthash.app.metrics import MetricsClient
from wrap.resolvers.ens_contenthash.ethereum.client import Web3ContractCaller
from wrap.resolvers.ens_contenthash.resolve.dispatcher import ResolutionDispatcher
from wrap.resolvers.ens_contenthash.resolve.name import NameResolver


logger = logging.getLogger(__name__)

_ADDRESS = re.compile(r"^0x[0-9a-fA-F]{40}$")


class Settings(BaseSettings):
    """
    Application settings for the ENS contenthash resolver service.

    Environment variables are mapped to settings fields automatically. Mapping fields
    (ENS_ADDRESSES, ETHEREUM_PROVIDERS) are given as JSON objects keyed by network name.
    """

    debug: bool = False
    """
    Enable debug mode for verbose logging of outgoing requests.
    Set with DEBUG=true environment variable.
    """

    http_port: int = Field(alias="port", default=5200)
    """
    HTTP port for the service to listen on.
    Set with PORT environment variable.
    """

    sentry_dsn: Optional[str] = None
    """
    Sentry DSN for error reporting. Optional, no error reporting if not set.
    Set with SENTRY_DSN environment variable.
    """

    ens_addresses: Dict[str, str] = Field(default_factory=dict)
    """
    ENS registry contract address per network, overriding the well-known registry.
    Set with ENS_ADDRESSES environment variable, e.g. {"rinkeby": "0x..."}.
    """

    ethereum_providers: Dict[str, str] = Field(
        default_factory=lambda: {"mainnet": "https://cloudflare-eth.com"}
    )
    """
    JSON-RPC endpoint per network used for contract calls.
    Set with ETHEREUM_PROVIDERS environment variable.
    """

    ethereum_request_timeout: float = 10.0
    """
    Timeout in seconds for a single JSON-RPC request.
    Set with ETHEREUM_REQUEST_TIMEOUT environment variable.
    """

    metrics_backend: str = "none"
    """
    Metrics backend, 'telegraf' or 'none'.
    Set with METRICS_BACKEND environment variable.
    """

    statsd_host: str = Field(alias="TELEGRAF_HOST", default="telegraf")
    """
    StatsD/Telegraf host for metrics collection.
    Set with TELEGRAF_HOST environment variable.
    """

    statsd_port: int = Field(alias="TELEGRAF_PORT", default=8125)
    """
    StatsD/Telegraf port for metrics collection.
    Set with TELEGRAF_PORT environment variable.
    """

    statsd_prefix: str = "ens_contenthash"
    """
    Prefix for all StatsD metrics from this service.
    Set with STATSD_PREFIX environment variable.
    """

    @field_validator("ens_addresses", mode="after")
    @classmethod
    def validate_ens_addresses(cls, v: Dict[str, str]) -> Dict[str, str]:
        """
        Lowercase network names and check that every value is a hex address.

        Raises:
            ValueError: If an address is not 0x followed by 40 hex characters
        """
        addresses = {}
        for network, address in v.items():
            if not _ADDRESS.match(address):
                raise ValueError(f"Invalid ENS registry address for {network}: {address}")
            addresses[network.lower()] = address
        return addresses

    @field_validator("ethereum_providers", mode="after")
    @classmethod
    def validate_ethereum_providers(cls, v: Dict[str, str]) -> Dict[str, str]:
        return {network.lower(): url for network, url in v.items()}


SettingsAppKey: Final = web.AppKey("settings", Settings)
"""AppKey for accessing the application settings"""

ContractCallerAppKey: Final = web.AppKey("contract_caller", Web3ContractCaller)
"""AppKey for accessing the web3.py contract caller"""

NameResolverAppKey: Final = web.AppKey("name_resolver", NameResolver)
"""AppKey for accessing the ENS name resolver"""

DispatcherAppKey: Final = web.AppKey("dispatcher", ResolutionDispatcher)
"""AppKey for accessing the URI resolution dispatcher"""

MetricsClientAppKey: Final = web.AppKey("metrics_client", MetricsClient)
"""AppKey for accessing the metrics client"""
