import logging
from typing import Any, List, Optional

from ..core.database import Databases
from ..schemas.favorites import FavoriteOut
from ..utils.enums import enum_value
from ..utils.log_sanitizer import sanitize_for_log
from .blueprint_service import author_name, to_blueprint_id
from .composition import DanglingReferenceError, MissingReference, merge_by_id

logger = logging.getLogger(__name__)

FAVORITES_LIMIT = 20


def to_favorite(favorite: Any, blueprint: Any, owner: Optional[Any]) -> FavoriteOut:
    return FavoriteOut(
        id=blueprint.id,
        name=blueprint.name,
        description=blueprint.description,
        downloads=blueprint.usage_count,
        favorites=blueprint.favorites,
        tier=enum_value(blueprint.tier),
        author=author_name(blueprint, owner),
        is_official=blueprint.is_official,
        favorited_at=favorite.created_at,
    )


class FavoritesService:
    """Favorites are stored in the users schema and point at blueprints in the app schema."""

    def __init__(self, databases: Databases):
        self.databases = databases

    async def _fetch_blueprints(self, ids: List[str]) -> List[Any]:
        return await self.databases.app.blueprint.find_many(where={"id": {"in": ids}})

    async def _fetch_owners(self, ids: List[str]) -> List[Any]:
        return await self.databases.users.user.find_many(where={"id": {"in": ids}})

    async def list_for_user(self, user_id: str) -> List[FavoriteOut]:
        favorites = await self.databases.users.templatefavorite.find_many(
            where={"user_id": user_id},
            order={"created_at": "desc"},
            take=FAVORITES_LIMIT,
        )

        pairs = await merge_by_id(
            favorites,
            key=lambda fav: fav.blueprint_id,
            fetch=self._fetch_blueprints,
            attach=lambda fav, blueprint: (fav, blueprint),
            policy=MissingReference.OMIT,
            schema="app",
        )

        return await merge_by_id(
            pairs,
            key=lambda pair: pair[1].owner_id,
            fetch=self._fetch_owners,
            attach=lambda pair, owner: to_favorite(pair[0], pair[1], owner),
            policy=MissingReference.NULL,
            schema="users",
        )

    async def toggle(self, user_id: str, api_blueprint_id: str) -> bool:
        """Add the favorite if missing, remove it otherwise. Returns the new state."""
        blueprint_id = to_blueprint_id(api_blueprint_id)

        existing = await self.databases.users.templatefavorite.find_unique(
            where={"user_id_blueprint_id": {"user_id": user_id, "blueprint_id": blueprint_id}}
        )

        if existing is not None:
            await self.databases.users.templatefavorite.delete(where={"id": existing.id})
            blueprint = await self.databases.app.blueprint.find_unique(where={"id": blueprint_id})
            if blueprint is not None and blueprint.favorites > 0:
                await self.databases.app.blueprint.update(
                    where={"id": blueprint_id},
                    data={"favorites": {"decrement": 1}},
                )
            return False

        # The users schema cannot enforce this reference, so check before writing
        blueprint = await self.databases.app.blueprint.find_unique(where={"id": blueprint_id})
        if blueprint is None:
            raise DanglingReferenceError("app", [blueprint_id])

        await self.databases.users.templatefavorite.create(
            data={"user_id": user_id, "blueprint_id": blueprint_id}
        )
        await self.databases.app.blueprint.update(
            where={"id": blueprint_id},
            data={"favorites": {"increment": 1}},
        )
        logger.info(f"[FAVORITES] user={user_id} favorited blueprint={sanitize_for_log(blueprint_id)}")
        return True
