from typing import Optional

from .base import CamelModel


class PublicConfig(CamelModel):
    """Runtime values the browser needs; null when not configured."""
    turnstile_site_key: Optional[str] = None
    umami_website_id: Optional[str] = None
