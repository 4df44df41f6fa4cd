"""Application keys for type-safe app configuration access."""

from aiohttp import web

from diplodocus.config import Config
from diplodocus.core.resolver import RequestResolver

config_key = web.AppKey("config", Config)
resolver_key = web.AppKey("resolver", RequestResolver)
