"""aiohttp server for Diplodocus.

Application factory and route registration.
"""

import logging

from aiohttp import web

from diplodocus.api.pages import create_pages_routes
from diplodocus.app_keys import config_key, resolver_key
from diplodocus.config import Config
from diplodocus.core.markdown import MarkdownRenderer
from diplodocus.core.resolver import RequestResolver

logger = logging.getLogger(__name__)


def create_app(config: Config) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration

    Returns:
        Configured aiohttp application
    """
    app = web.Application()

    resolver = RequestResolver(config.docs, config.site, MarkdownRenderer())

    app[config_key] = config
    app[resolver_key] = resolver

    # Catch-all: every path resolves against the content directory
    app.router.add_routes(create_pages_routes())

    return app


def run_server(config: Config) -> None:
    """Run the server.

    Args:
        config: Application configuration
    """
    app = create_app(config)
    logger.info(f"Serving {config.docs.source_dir} on http://{config.server.host}:{config.server.port}")
    web.run_app(app, host=config.server.host, port=config.server.port, print=None)
