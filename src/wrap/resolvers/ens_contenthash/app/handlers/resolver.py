import logging
from aiohttp import web
from wrap.resolvers.ens_contenthash.app.config import DispatcherAppKey, NameResolverAppKey
from wrap.resolvers.ens_contenthash.resolve.dispatcher import to_maybe_uri_or_manifest
from wrap.resolvers.ens_contenthash.resolve.domain import parse_domain
from wrap.resolvers.ens_contenthash.resolve.errors import ResolutionError

logger = logging.getLogger(__name__)


async def handle_internal_alive(request: web.Request):
    return web.Response(status=200)


async def handle_try_resolve_uri(request: web.Request):
    authority = request.query.get("authority")
    path = request.query.get("path")
    if authority is None or path is None:
        raise web.HTTPBadRequest(
            text='{"error": "authority and path are required"}',
            content_type="application/json",
        )

    outcome = await request.app[DispatcherAppKey].try_resolve(authority, path)
    return web.json_response(to_maybe_uri_or_manifest(outcome))


async def handle_get_file(request: web.Request):
    dispatcher = request.app[DispatcherAppKey]
    return web.json_response(dispatcher.get_file(request.query.get("path", "")))


async def handle_internal_resolve(request: web.Request):
    domains = request.query.getall("domain", [])
    if len(domains) == 0:
        return web.json_response([])

    name_resolver = request.app[NameResolverAppKey]

    # TODO: Resolve domains concurrently once the RPC providers are rate limited per network.
    results = []
    for domain in domains:
        try:
            contenthash = await name_resolver.resolve(domain)
        except ResolutionError as e:
            logger.info("Unable to resolve %s: %s", domain, e)
            continue
        parsed = parse_domain(domain)
        results.append(
            {
                "domain": parsed.name,
                "network": parsed.network,
                "registry": name_resolver.registry_address(parsed.network),
                "contenthash": contenthash,
            }
        )
    return web.json_response(results)
