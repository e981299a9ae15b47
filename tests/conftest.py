"""
Shared test configuration and fixtures for resolver tests.

Provides a scripted contract backend wired for the common resolution scenario: the default
registry points foo.eth at RESOLVER, which carries a contenthash record.
"""

import pytest

from wrap.resolvers.ens_contenthash.resolve.dispatcher import ResolutionDispatcher
from wrap.resolvers.ens_contenthash.resolve.name import NameResolver

from tests.test_helpers import (
    CONTENTHASH,
    DEFAULT_REGISTRY,
    RESOLVER,
    ScriptedContractCaller,
    ok,
)


@pytest.fixture
def contract_caller():
    """Scripted backend where the default registry resolves to RESOLVER with a contenthash."""
    return ScriptedContractCaller(
        {
            (DEFAULT_REGISTRY, "resolver"): ok(RESOLVER),
            (RESOLVER, "contenthash"): ok(CONTENTHASH),
        }
    )


@pytest.fixture
def name_resolver(contract_caller):
    return NameResolver(contract_caller)


@pytest.fixture
def dispatcher(name_resolver):
    return ResolutionDispatcher(name_resolver)
