from typing import Any, List


class SupportService:
    """Read-only access to the support forum's taxonomy."""

    def __init__(self, support_db):
        self.support_db = support_db

    async def active_tags(self) -> List[Any]:
        return await self.support_db.supporttag.find_many(
            where={"is_active": True},
            order={"name": "asc"},
        )

    async def active_categories(self) -> List[Any]:
        return await self.support_db.supportcategory.find_many(
            where={"is_active": True},
            order={"order": "asc"},
        )
