"""
Application Layer

This package exposes the ENS contenthash resolver over HTTP using the aiohttp framework, so that
an out-of-process URI resolution pipeline can query it.

Key Components:
- cli.py: Entry point for running the application
- server.py: Web server configuration, middleware setup and resource lifecycle
- config.py: Configuration management using Pydantic settings
- metrics.py: Metrics abstraction over StatsD
- handlers/: Request handlers

The application uses two middleware layers:
- Statsd middleware for metrics collection
- Sentry middleware for error reporting

It provides the following endpoints:
- URI resolver endpoints (/uri-resolver/try-resolve-uri, /uri-resolver/get-file)
- Internal endpoints (/internal/alive, /internal/api/resolve)
"""
