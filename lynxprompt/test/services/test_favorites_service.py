import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
from datetime import datetime, timezone
from ...core.database import Databases
from ...services.composition import DanglingReferenceError
from ...services.favorites_service import FavoritesService


class TestFavoritesService:
    """Tests for FavoritesService"""

    @pytest.fixture
    def databases(self):
        return Databases(app=MagicMock(), users=MagicMock(), blog=MagicMock(), support=MagicMock())

    @pytest.fixture
    def service(self, databases):
        return FavoritesService(databases)

    @pytest.mark.asyncio
    async def test_list_attaches_owner_names(self, service, databases):
        favorited_at = datetime(2025, 4, 1, tzinfo=timezone.utc)
        databases.users.templatefavorite.find_many = AsyncMock(return_value=[
            SimpleNamespace(blueprint_id="bp1", created_at=favorited_at),
        ])
        databases.app.blueprint.find_many = AsyncMock(return_value=[
            SimpleNamespace(id="bp1", name="Go rules", description=None, usage_count=5, favorites=2,
                            tier="ADVANCED", owner_id="user-9", is_official=False),
        ])
        databases.users.user.find_many = AsyncMock(return_value=[
            SimpleNamespace(id="user-9", name="Grace", display_name=None),
        ])

        favorites = await service.list_for_user("user-1")

        assert len(favorites) == 1
        assert favorites[0].author == "Grace"
        assert favorites[0].favorited_at == favorited_at

    @pytest.mark.asyncio
    async def test_add_checks_blueprint_exists(self, service, databases):
        databases.users.templatefavorite.find_unique = AsyncMock(return_value=None)
        databases.users.templatefavorite.create = AsyncMock()
        databases.app.blueprint.find_unique = AsyncMock(return_value=None)

        with pytest.raises(DanglingReferenceError) as exc_info:
            await service.toggle("user-1", "bp_missing")

        assert exc_info.value.missing_ids == ["missing"]
        databases.users.templatefavorite.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_remove_decrements_counter(self, service, databases):
        databases.users.templatefavorite.find_unique = AsyncMock(return_value=SimpleNamespace(id="fav-1"))
        databases.users.templatefavorite.delete = AsyncMock()
        databases.app.blueprint.find_unique = AsyncMock(return_value=SimpleNamespace(id="bp1", favorites=3))
        databases.app.blueprint.update = AsyncMock()

        favorited = await service.toggle("user-1", "bp1")

        assert favorited is False
        databases.users.templatefavorite.delete.assert_awaited_once_with(where={"id": "fav-1"})
        databases.app.blueprint.update.assert_awaited_once_with(
            where={"id": "bp1"},
            data={"favorites": {"decrement": 1}},
        )
        databases.users.templatefavorite.find_unique.assert_awaited_once_with(
            where={"user_id_blueprint_id": {"user_id": "user-1", "blueprint_id": "bp1"}}
        )

    @pytest.mark.asyncio
    async def test_remove_for_deleted_blueprint_skips_counter(self, service, databases):
        databases.users.templatefavorite.find_unique = AsyncMock(return_value=SimpleNamespace(id="fav-1"))
        databases.users.templatefavorite.delete = AsyncMock()
        databases.app.blueprint.find_unique = AsyncMock(return_value=None)
        databases.app.blueprint.update = AsyncMock()

        assert await service.toggle("user-1", "bp1") is False
        databases.app.blueprint.update.assert_not_called()
