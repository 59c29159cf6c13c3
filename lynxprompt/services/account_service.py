from typing import Any, Dict

from ..core.database import Databases
from ..utils.enums import SubscriptionPlanEnum, enum_value
from .blueprint_service import BlueprintService


class AccountService:

    def __init__(self, databases: Databases):
        self.databases = databases

    async def summary(self, user: Any) -> Dict[str, Any]:
        """Account info for an authenticated user; the blueprint count comes from the app schema."""
        blueprints_count = await BlueprintService(self.databases).count_owned_by(user.id)

        return {
            "user": {
                "id": user.id,
                "email": user.email,
                "name": user.name,
                "display_name": user.display_name,
                "persona": user.persona,
                "skill_level": user.skill_level,
                "subscription": {
                    "plan": enum_value(user.subscription_plan) or SubscriptionPlanEnum.FREE.value,
                    "status": user.subscription_status,
                    "interval": user.subscription_interval,
                    "current_period_end": user.current_period_end,
                },
                "stats": {"blueprints_count": blueprints_count},
                "created_at": user.created_at,
            }
        }
