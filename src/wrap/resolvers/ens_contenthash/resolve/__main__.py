from typing import List, Tuple
import argparse
import asyncio
import logging

logger = logging.getLogger(__name__)

from wrap.resolvers.ens_contenthash.ethereum.client import Web3ContractCaller
from wrap.resolvers.ens_contenthash.resolve.dispatcher import (
    ENS_AUTHORITY,
    ResolutionDispatcher,
)
from wrap.resolvers.ens_contenthash.resolve.name import NameResolver


def parse_assignment(value: str) -> Tuple[str, str]:
    """Parse a NETWORK=VALUE pair given on the command line."""
    network, sep, target = value.partition("=")
    if not sep or not network or not target:
        raise argparse.ArgumentTypeError(f"expected NETWORK=VALUE, got {value!r}")
    return network.lower(), target


async def realMain() -> None:
    parser = argparse.ArgumentParser(
        prog="ens-contenthash-resolve", description="Resolve ENS contenthash records"
    )
    parser.add_argument("domain", nargs="+", help="The domain(s) to resolve.")
    parser.add_argument(
        "--provider",
        action="append",
        default=[],
        type=parse_assignment,
        metavar="NETWORK=URL",
        help="JSON-RPC endpoint for a network. May be repeated.",
    )
    parser.add_argument(
        "--address",
        action="append",
        default=[],
        type=parse_assignment,
        metavar="NETWORK=ADDRESS",
        help="ENS registry address override for a network. May be repeated.",
    )

    args = vars(parser.parse_args())

    providers = {"mainnet": "https://cloudflare-eth.com"}
    providers.update(args.get("provider", []))
    addresses = dict(args.get("address", []))

    domains: List[str] = args.get("domain", [])

    contract_caller = Web3ContractCaller(providers)
    dispatcher = ResolutionDispatcher(NameResolver(contract_caller, addresses))
    try:
        for domain in domains:
            try:
                outcome = await dispatcher.try_resolve(ENS_AUTHORITY, domain)
                print(f"{domain} {outcome!r}")
            except Exception:
                logging.exception("Exception resolving domain %s", domain)
    finally:
        await contract_caller.close()


def main() -> None:
    asyncio.run(realMain())


if __name__ == "__main__":
    main()
