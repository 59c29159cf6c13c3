# Export all schemas for convenient imports
from .blog import BlogAuthor, BlogListResponse, BlogPostOut
from .blueprint import BlueprintDetail, BlueprintListResponse, BlueprintSummary, OwnerProfile
from .cli_auth import CliCallbackRequest, CliCallbackResponse, CliInitResponse, CliPollResponse, CliUser
from .config import PublicConfig
from .favorites import FavoriteOut, FavoriteToggleRequest, FavoriteToggleResponse
from .support import SupportCategoryOut, SupportTagOut
from .user import AccountResponse, PageResponse, PageUser

__all__ = [
    "BlogAuthor",
    "BlogListResponse",
    "BlogPostOut",
    "BlueprintDetail",
    "BlueprintListResponse",
    "BlueprintSummary",
    "OwnerProfile",
    "CliCallbackRequest",
    "CliCallbackResponse",
    "CliInitResponse",
    "CliPollResponse",
    "CliUser",
    "PublicConfig",
    "FavoriteOut",
    "FavoriteToggleRequest",
    "FavoriteToggleResponse",
    "SupportCategoryOut",
    "SupportTagOut",
    "AccountResponse",
    "PageResponse",
    "PageUser",
]
