# Core app-level configuration and utilities
from .config import settings
from .database import Databases, get_databases
from . import auth

__all__ = ["settings", "Databases", "get_databases", "auth"]
