from typing import Any, Dict, List, Optional, Tuple

from ..core.database import Databases
from ..schemas.blueprint import BlueprintDetail, BlueprintSummary, OwnerProfile
from ..utils.enums import BlueprintVisibilityEnum, enum_value
from .composition import MissingReference, merge_by_id

# Prefixes the marketplace and the v1 API put in front of blueprint ids
BLUEPRINT_ID_PREFIXES = ("bp_", "usr_")

OFFICIAL_AUTHOR = "LynxPrompt"
ANONYMOUS_AUTHOR = "Anonymous"

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100

TYPE_PLATFORMS: Dict[str, List[str]] = {
    "CURSORRULES": ["cursor"],
    "CLAUDE_MD": ["claude"],
    "COPILOT_INSTRUCTIONS": ["copilot"],
    "WINDSURF_RULES": ["windsurf"],
}


def to_blueprint_id(api_id: str) -> str:
    for prefix in BLUEPRINT_ID_PREFIXES:
        if api_id.startswith(prefix):
            return api_id[len(prefix):]
    return api_id


def platforms_for(blueprint: Any) -> List[str]:
    compatible = list(blueprint.compatible_with or [])
    if compatible:
        return [p for p in [blueprint.target_platform, *compatible] if p]
    return list(TYPE_PLATFORMS.get(enum_value(blueprint.type), []))


def author_name(blueprint: Any, owner: Optional[Any]) -> str:
    if owner is not None:
        return owner.display_name or owner.name or ANONYMOUS_AUTHOR
    if blueprint.is_official or blueprint.owner_id is None:
        return OFFICIAL_AUTHOR
    return ANONYMOUS_AUTHOR


def _summary_fields(blueprint: Any, owner: Optional[Any]) -> Dict[str, Any]:
    return {
        "id": blueprint.id,
        "name": blueprint.name,
        "description": blueprint.description or "",
        "type": enum_value(blueprint.type),
        "tier": enum_value(blueprint.tier),
        "visibility": enum_value(blueprint.visibility),
        "category": blueprint.category,
        "tags": list(blueprint.tags or []),
        "platforms": platforms_for(blueprint),
        "author": author_name(blueprint, owner),
        "author_id": blueprint.owner_id,
        "owner": OwnerProfile.model_validate(owner) if owner is not None else None,
        "downloads": blueprint.usage_count,
        "favorites": blueprint.favorites,
        "is_official": blueprint.is_official,
        "created_at": blueprint.created_at,
    }


def to_summary(blueprint: Any, owner: Optional[Any]) -> BlueprintSummary:
    return BlueprintSummary(**_summary_fields(blueprint, owner))


def to_detail(blueprint: Any, owner: Optional[Any]) -> BlueprintDetail:
    return BlueprintDetail(
        **_summary_fields(blueprint, owner),
        content=blueprint.content,
        target_platform=blueprint.target_platform,
        compatible_with=list(blueprint.compatible_with or []),
    )


def can_view(blueprint: Any, viewer_id: Optional[str]) -> bool:
    if enum_value(blueprint.visibility) == BlueprintVisibilityEnum.PUBLIC.value:
        return True
    return viewer_id is not None and blueprint.owner_id == viewer_id


class BlueprintService:
    """Blueprints live in the app schema; their owners live in the users schema."""

    def __init__(self, databases: Databases):
        self.databases = databases

    async def _fetch_owners(self, ids: List[str]) -> List[Any]:
        return await self.databases.users.user.find_many(where={"id": {"in": ids}})

    async def list_public(
        self,
        search: Optional[str] = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> Tuple[List[BlueprintSummary], int]:
        limit = max(1, min(limit, MAX_PAGE_SIZE))
        offset = max(0, offset)

        where: Dict[str, Any] = {"visibility": BlueprintVisibilityEnum.PUBLIC.value}
        if search:
            where["OR"] = [
                {"name": {"contains": search, "mode": "insensitive"}},
                {"description": {"contains": search, "mode": "insensitive"}},
            ]

        total = await self.databases.app.blueprint.count(where=where)
        blueprints = await self.databases.app.blueprint.find_many(
            where=where,
            order=[{"usage_count": "desc"}, {"created_at": "desc"}],
            take=limit,
            skip=offset,
        )

        summaries = await merge_by_id(
            blueprints,
            key=lambda bp: bp.owner_id,
            fetch=self._fetch_owners,
            attach=to_summary,
            policy=MissingReference.NULL,
            schema="users",
        )
        return summaries, total

    async def get(self, api_id: str, viewer_id: Optional[str] = None) -> Optional[BlueprintDetail]:
        blueprint = await self.databases.app.blueprint.find_unique(where={"id": to_blueprint_id(api_id)})
        if blueprint is None or not can_view(blueprint, viewer_id):
            return None

        merged = await merge_by_id(
            [blueprint],
            key=lambda bp: bp.owner_id,
            fetch=self._fetch_owners,
            attach=to_detail,
            policy=MissingReference.NULL,
            schema="users",
        )
        return merged[0]

    async def record_view(self, blueprint_id: str) -> None:
        await self.databases.app.blueprint.update(
            where={"id": to_blueprint_id(blueprint_id)},
            data={"usage_count": {"increment": 1}},
        )

    async def count_owned_by(self, user_id: str) -> int:
        return await self.databases.app.blueprint.count(where={"owner_id": user_id})
