"""Application keys for type-safe app configuration access."""

from aiohttp import web

from kiln.config import Config
from kiln.core.renderer import PageCompiler
from kiln.hooks import Hooks

config_key = web.AppKey("config", Config)
compiler_key = web.AppKey("compiler", PageCompiler)
hooks_key = web.AppKey("hooks", Hooks)
verbose_key = web.AppKey("verbose", bool)
