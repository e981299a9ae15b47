"""
Metrics Abstraction Layer

This module provides the metrics interface used by the resolver and the HTTP service, so that
resolution code records counters and timings without depending on a particular backend.

Key Components:
- MetricsClient: Abstract interface for all metrics operations
- TelegrafCompatibilityClient: Wrapper around aio-statsd's TelegrafStatsdClient
- NoOpMetricsClient: No-operation client for disabled metrics
- create_metrics_client: Factory function for backend selection

Two metric types are recorded:
- Counters: resolution outcomes, HTTP request and exception counts
- Timers: resolution and HTTP request durations, in seconds
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Union

try:
    from aio_statsd import TelegrafStatsdClient
    TELEGRAF_AVAILABLE = True
except ImportError:
    TELEGRAF_AVAILABLE = False

logger = logging.getLogger(__name__)


class MetricsClient(ABC):
    """
    Abstract metrics client.

    Tags are passed as plain dictionaries and forwarded to the backend as metric dimensions.
    """

    @abstractmethod
    def increment(
        self,
        name: str,
        value: Union[int, float] = 1,
        tag_dict: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Increment a counter metric by the specified value.

        Args:
            name: Metric name (e.g., 'ens_contenthash.resolve.count')
            value: Amount to increment by (default: 1)
            tag_dict: Optional tags for metric dimensions
        """

    @abstractmethod
    def timer(
        self,
        name: str,
        value: Union[int, float],
        tag_dict: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Record a duration in seconds.

        Args:
            name: Metric name (e.g., 'ens_contenthash.resolve.time')
            value: Duration in seconds
            tag_dict: Optional tags for metric dimensions
        """

    @abstractmethod
    async def close(self) -> None:
        """Flush pending metrics and release backend connections."""


class TelegrafCompatibilityClient(MetricsClient):
    """MetricsClient delegating to a TelegrafStatsdClient."""

    def __init__(self, telegraf_client: Any, prefix: str = ""):
        if not TELEGRAF_AVAILABLE:
            raise ImportError(
                "TelegrafStatsdClient not available. Install with: pip install aio-statsd"
            )

        self.client = telegraf_client
        self.prefix = prefix

    def _name(self, name: str) -> str:
        if self.prefix and not name.startswith(f"{self.prefix}."):
            return f"{self.prefix}.{name}"
        return name

    def increment(
        self,
        name: str,
        value: Union[int, float] = 1,
        tag_dict: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.client.increment(self._name(name), value, tag_dict=tag_dict or {})

    def timer(
        self,
        name: str,
        value: Union[int, float],
        tag_dict: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.client.timer(self._name(name), value, tag_dict=tag_dict or {})

    async def close(self) -> None:
        try:
            await self.client.close()
        except Exception as e:
            logger.warning(f"Error closing Telegraf client: {e}")


class NoOpMetricsClient(MetricsClient):
    """Metrics client that discards everything. Used when metrics are disabled and in tests."""

    def increment(
        self,
        name: str,
        value: Union[int, float] = 1,
        tag_dict: Optional[Dict[str, Any]] = None,
    ) -> None:
        pass

    def timer(
        self,
        name: str,
        value: Union[int, float],
        tag_dict: Optional[Dict[str, Any]] = None,
    ) -> None:
        pass

    async def close(self) -> None:
        pass


async def create_metrics_client(
    backend: str,
    host: str = "localhost",
    port: int = 8125,
    prefix: str = "",
    telegraf_client: Optional[Any] = None,
    debug: bool = False,
) -> MetricsClient:
    """
    Create the metrics client for a backend type.

    A new TelegrafStatsdClient is connected before being returned. A pre-configured client
    passed as telegraf_client is used as is.

    Args:
        backend: Backend type ('telegraf' or 'none')
        host: Telegraf/StatsD host
        port: Telegraf/StatsD port
        prefix: Prefix prepended to every metric name
        telegraf_client: Pre-configured TelegrafStatsdClient instance
        debug: Enable debug logging in the StatsD client

    Returns:
        MetricsClient: Configured metrics client instance

    Raises:
        ValueError: If backend type is invalid or aio-statsd is missing
    """
    backend = backend.lower()

    if backend == "telegraf":
        if telegraf_client:
            return TelegrafCompatibilityClient(telegraf_client, prefix=prefix)

        if not TELEGRAF_AVAILABLE:
            logger.error("Telegraf backend requested but aio-statsd package not available")
            raise ValueError(
                "aio-statsd package required for 'telegraf' backend. "
                "Install with: pip install aio-statsd"
            )

        telegraf_client = TelegrafStatsdClient(host=host, port=port, debug=debug)
        await telegraf_client.connect()
        return TelegrafCompatibilityClient(telegraf_client, prefix=prefix)

    elif backend == "none":
        logger.info("Metrics collection disabled (no-op client)")
        return NoOpMetricsClient()

    raise ValueError(
        f"Invalid metrics backend: {backend}. Supported backends: 'telegraf', 'none'"
    )
