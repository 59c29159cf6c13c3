from enum import Enum

class BlueprintVisibilityEnum(str, Enum):
    PRIVATE = "PRIVATE"
    TEAM = "TEAM"
    PUBLIC = "PUBLIC"

class BlueprintTierEnum(str, Enum):
    SIMPLE = "SIMPLE"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"

class SubscriptionPlanEnum(str, Enum):
    FREE = "FREE"
    PRO = "PRO"
    MAX = "MAX"
    TEAMS = "TEAMS"

class CliSessionStatusEnum(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"

class CliPollStatusEnum(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    EXPIRED = "expired"

class PostStatusEnum(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"

class ApiTokenRoleEnum(str, Enum):
    FULL = "FULL"
    BLUEPRINTS_FULL = "BLUEPRINTS_FULL"
    BLUEPRINTS_READONLY = "BLUEPRINTS_READONLY"
    PROFILE_FULL = "PROFILE_FULL"


def enum_value(value):
    """Plain string for a Prisma enum, one of ours, or an already-plain str."""
    if value is None:
        return None
    return getattr(value, "value", value)
