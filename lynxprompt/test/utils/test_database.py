import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from ...core.config import Settings
from ...core.database import DatabaseConfigError, Databases, create_client, create_databases


def make_client(connected=True):
    client = MagicMock()
    client.is_connected.return_value = connected
    client.connect = AsyncMock()
    client.disconnect = AsyncMock()
    client.query_raw = AsyncMock(return_value=[{"?column?": 1}])
    return client


class TestCreateClient:
    """Tests for per-schema client construction"""

    def test_missing_url_names_the_variable(self):
        settings = Settings(_env_file=None, database_url_app=None)

        with pytest.raises(DatabaseConfigError, match="DATABASE_URL_APP is not set"):
            create_client("app", settings)

    def test_ungenerated_client_names_the_command(self):
        settings = Settings(_env_file=None, database_url_blog="postgresql://localhost/blog")

        with patch("lynxprompt.core.database.importlib.import_module", side_effect=ModuleNotFoundError("x")):
            with pytest.raises(DatabaseConfigError, match="prisma generate --schema prisma/schema-blog.prisma"):
                create_client("blog", settings)

    def test_builds_one_client_per_schema(self):
        settings = Settings(
            _env_file=None,
            node_env="production",
            database_url_app="postgresql://db/app",
            database_url_users="postgresql://db/users",
            database_url_blog="postgresql://db/blog",
            database_url_support="postgresql://db/support",
        )
        client_cls = MagicMock()

        with patch("lynxprompt.core.database._load_client_class", return_value=client_cls):
            databases = create_databases(settings)

        assert [schema for schema, _ in databases.items()] == ["app", "users", "blog", "support"]
        client_cls.assert_any_call(datasource={"url": "postgresql://db/users"}, log_queries=False)


class TestDatabases:
    """Tests for the Databases container"""

    @pytest.mark.asyncio
    async def test_disconnect_skips_unconnected_clients(self):
        databases = Databases(app=make_client(), users=make_client(connected=False),
                              blog=make_client(), support=make_client())

        await databases.disconnect()

        databases.app.disconnect.assert_awaited_once()
        databases.users.disconnect.assert_not_called()

    @pytest.mark.asyncio
    async def test_ping_reports_each_schema(self):
        broken = make_client()
        broken.query_raw = AsyncMock(side_effect=Exception("connection reset"))
        databases = Databases(app=make_client(), users=broken,
                              blog=make_client(connected=False), support=make_client())

        status = await databases.ping()

        assert status == {"app": True, "users": False, "blog": False, "support": True}
