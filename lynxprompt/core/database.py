"""
Per-schema database clients.

Each bounded context (app, users, blog, support) has its own Prisma schema,
its own generated client package and its own connection string. The four
clients are built once when the process starts and handed to request
handlers through the ``get_databases`` dependency.
"""
import importlib
import logging
from dataclasses import dataclass, fields
from typing import Any, Dict, Iterator, Tuple

from fastapi import Request

from .config import Settings

logger = logging.getLogger(__name__)

SCHEMAS = ("app", "users", "blog", "support")


class DatabaseConfigError(RuntimeError):
    pass


@dataclass
class Databases:
    app: Any
    users: Any
    blog: Any
    support: Any

    def items(self) -> Iterator[Tuple[str, Any]]:
        for field in fields(self):
            yield field.name, getattr(self, field.name)

    async def connect(self) -> None:
        for schema, client in self.items():
            await client.connect()
            logger.info(f"[DB] Connected to '{schema}' database")

    async def disconnect(self) -> None:
        for schema, client in self.items():
            if client.is_connected():
                await client.disconnect()
                logger.info(f"[DB] Disconnected from '{schema}' database")

    async def ping(self) -> Dict[str, bool]:
        status: Dict[str, bool] = {}
        for schema, client in self.items():
            try:
                if not client.is_connected():
                    status[schema] = False
                    continue
                await client.query_raw("SELECT 1")
                status[schema] = True
            except Exception as e:
                logger.error(f"[DB] Ping failed for '{schema}': {e}")
                status[schema] = False
        return status


def _load_client_class(schema: str):
    module_name = f"lynxprompt.generated.prisma_{schema}"
    try:
        module = importlib.import_module(module_name)
    except ModuleNotFoundError as exc:
        raise DatabaseConfigError(
            f"Prisma client for '{schema}' has not been generated. "
            f"Run: prisma generate --schema prisma/schema-{schema}.prisma"
        ) from exc
    return module.Prisma


def create_client(schema: str, settings: Settings):
    url = settings.database_url_for(schema)
    if not url:
        raise DatabaseConfigError(f"DATABASE_URL_{schema.upper()} is not set")

    client_cls = _load_client_class(schema)
    return client_cls(
        datasource={"url": url},
        log_queries=settings.is_development,
    )


def create_databases(settings: Settings) -> Databases:
    return Databases(**{schema: create_client(schema, settings) for schema in SCHEMAS})


def get_databases(request: Request) -> Databases:
    return request.app.state.databases
