from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # One connection string per schema
    database_url_app: str | None = None
    database_url_blog: str | None = None
    database_url_support: str | None = None
    database_url_users: str | None = None

    # Public values handed to the browser at runtime
    next_public_turnstile_site_key: str | None = None
    next_public_umami_website_id: str | None = None

    node_env: str = "development"
    base_url: str = "https://lynxprompt.com"

    session_cookie_name: str = "lynxprompt.session-token"
    cli_session_ttl_minutes: int = 5
    cli_token_ttl_days: int = 365

    max_request_size_mb: int = 10

    model_config = SettingsConfigDict(
        env_file=[".env", ".env.test"],
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.node_env == "production"

    @property
    def is_development(self) -> bool:
        return self.node_env == "development"

    def database_url_for(self, schema: str) -> str | None:
        return getattr(self, f"database_url_{schema}", None)


settings = Settings()
