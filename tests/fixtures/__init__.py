"""Shared pytest fixtures: database, client, accounts and a seeded catalog."""

from .auth import *  # noqa: F401,F403
from .catalog import *  # noqa: F401,F403
from .core import *  # noqa: F401,F403
