import logging
from time import time
from typing import (
    Optional,
)
from aiohttp import web
import sentry_sdk
from sentry_sdk.integrations.aiohttp import AioHttpIntegration

from wrap.resolvers.ens_contenthash.app.config import (
    ContractCallerAppKey,
    DispatcherAppKey,
    MetricsClientAppKey,
    NameResolverAppKey,
    Settings,
    SettingsAppKey,
)
from wrap.resolvers.ens_contenthash.app.handlers.resolver import (
    handle_get_file,
    handle_internal_alive,
    handle_internal_resolve,
    handle_try_resolve_uri,
)
from wrap.resolvers.ens_contenthash.app.metrics import create_metrics_client
from wrap.resolvers.ens_contenthash.ethereum.client import Web3ContractCaller
from wrap.resolvers.ens_contenthash.resolve.dispatcher import ResolutionDispatcher
from wrap.resolvers.ens_contenthash.resolve.name import NameResolver

logger = logging.getLogger(__name__)


async def resolver_context(app):
    logger.info("Starting up")
    settings: Settings = app[SettingsAppKey]

    metrics_client = await create_metrics_client(
        settings.metrics_backend,
        host=settings.statsd_host,
        port=settings.statsd_port,
        prefix=settings.statsd_prefix,
        debug=settings.debug,
    )
    app[MetricsClientAppKey] = metrics_client

    contract_caller = Web3ContractCaller(
        settings.ethereum_providers,
        request_timeout=settings.ethereum_request_timeout,
    )
    app[ContractCallerAppKey] = contract_caller

    name_resolver = NameResolver(contract_caller, settings.ens_addresses)
    app[NameResolverAppKey] = name_resolver
    app[DispatcherAppKey] = ResolutionDispatcher(name_resolver, metrics=metrics_client)

    logger.info(
        "Startup complete, networks=%s overrides=%s",
        ",".join(contract_caller.networks),
        ",".join(name_resolver.addresses.addresses.keys()) or "none",
    )

    yield

    logger.info("Shutting down")

    await app[ContractCallerAppKey].close()
    await app[MetricsClientAppKey].close()


@web.middleware
async def sentry_middleware(request: web.Request, handler):
    try:
        response = await handler(request)
        return response
    except web.HTTPException:
        raise
    except Exception as e:
        sentry_sdk.capture_exception(e)
        raise e


@web.middleware
async def statsd_middleware(request: web.Request, handler):
    metrics_client = request.app[MetricsClientAppKey]
    request_method: str = request.method
    request_path = request.path

    start_time: float = time()
    response_status_code = 0

    try:
        response = await handler(request)
        response_status_code = response.status
        return response
    except Exception as e:
        metrics_client.increment(
            "ens_contenthash.server.request.exception",
            1,
            tag_dict={
                "exception": type(e).__name__,
                "path": request_path,
                "method": request_method,
            },
        )
        raise e
    finally:
        metrics_client.timer(
            "ens_contenthash.server.request.time",
            time() - start_time,
            tag_dict={"path": request_path, "method": request_method},
        )
        metrics_client.increment(
            "ens_contenthash.server.request.count",
            1,
            tag_dict={
                "path": request_path,
                "method": request_method,
                "status": response_status_code,
            },
        )


async def start_web_server(settings: Optional[Settings] = None):

    if settings is None:
        settings = Settings()
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            integrations=[AioHttpIntegration()],
        )
    app = web.Application(middlewares=[statsd_middleware, sentry_middleware])

    app[SettingsAppKey] = settings

    app.add_routes(
        [
            web.get("/internal/alive", handle_internal_alive),
            web.get("/internal/api/resolve", handle_internal_resolve),
            web.get("/uri-resolver/try-resolve-uri", handle_try_resolve_uri),
            web.get("/uri-resolver/get-file", handle_get_file),
        ]
    )

    app.cleanup_ctx.append(resolver_context)

    return app
