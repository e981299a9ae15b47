"""URI resolver entry point for the ``ens`` authority.

Maps the result of a name resolution into one of three outcomes understood by a URI
resolution pipeline: not applicable, resolved to a successor URI, or unresolved.
"""

import logging
from time import time
from typing import Any, Dict, Literal, Optional, Protocol, Union

import sentry_sdk
from pydantic import BaseModel

from wrap.resolvers.ens_contenthash.resolve.errors import ResolutionError
from wrap.resolvers.ens_contenthash.resolve.name import NameResolver

logger = logging.getLogger(__name__)

ENS_AUTHORITY = "ens"
SUCCESSOR_URI_PREFIX = "ens-contenthash/"


class ResolutionMetrics(Protocol):
    def increment(
        self, name: str, value: int = 1, tag_dict: Optional[Dict[str, Any]] = None
    ) -> None: ...

    def timer(
        self, name: str, value: float, tag_dict: Optional[Dict[str, Any]] = None
    ) -> None: ...


class NotApplicable(BaseModel):
    """The URI is not claimed by this resolver, or it resolved to no content."""

    kind: Literal["not_applicable"] = "not_applicable"


class Resolved(BaseModel):
    """The URI resolved to a successor URI."""

    kind: Literal["resolved"] = "resolved"
    uri: str


class Unresolved(BaseModel):
    """The URI was claimed but could not be resolved.

    reason holds the exception class name for logging and metrics only.
    """

    kind: Literal["unresolved"] = "unresolved"
    reason: Optional[str] = None


ResolutionOutcome = Union[NotApplicable, Resolved, Unresolved]


def successor_uri(contenthash: str) -> str:
    return f"{SUCCESSOR_URI_PREFIX}{contenthash}"


def to_maybe_uri_or_manifest(outcome: ResolutionOutcome) -> Optional[Dict[str, Any]]:
    """Encode an outcome in the shape URI resolution pipelines expect.

    Returns:
        None when not applicable, ``{"uri": <uri>, "manifest": None}`` when resolved,
        and ``{"uri": None, "manifest": None}`` when unresolved
    """
    if isinstance(outcome, Resolved):
        return {"uri": outcome.uri, "manifest": None}
    if isinstance(outcome, Unresolved):
        return {"uri": None, "manifest": None}
    return None


class ResolutionDispatcher:
    """Claim ``ens`` URIs and resolve them through a NameResolver.

    This is the only place where resolution errors are caught. A failed lookup is an expected
    outcome (the name may not exist or may not carry a contenthash record) and is reported as
    Unresolved rather than raised.
    """

    def __init__(
        self, name_resolver: NameResolver, metrics: Optional[ResolutionMetrics] = None
    ) -> None:
        self.name_resolver = name_resolver
        self.metrics = metrics

    async def try_resolve(self, authority: str, path: str) -> ResolutionOutcome:
        if authority != ENS_AUTHORITY:
            return NotApplicable()

        start_time = time()
        outcome = await self._resolve(path)
        if self.metrics is None:
            return outcome

        self.metrics.timer("ens_contenthash.resolve.time", time() - start_time)
        self.metrics.increment(
            "ens_contenthash.resolve.count", 1, tag_dict={"outcome": outcome.kind}
        )
        return outcome

    async def _resolve(self, path: str) -> ResolutionOutcome:
        try:
            contenthash = await self.name_resolver.resolve(path)
        except ResolutionError as e:
            logger.info("Unable to resolve %s: %s: %s", path, type(e).__name__, e)
            return Unresolved(reason=type(e).__name__)
        except Exception as e:
            logger.exception("Unexpected error resolving %s", path)
            sentry_sdk.capture_exception(e)
            return Unresolved(reason=type(e).__name__)

        if not contenthash:
            return NotApplicable()

        return Resolved(uri=successor_uri(contenthash))

    def get_file(self, path: str) -> None:
        """Files are never served directly, only through successor URIs."""
        return None
