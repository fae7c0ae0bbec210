from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Request size limits (uploads arrive base64-encoded inside JSON)
    max_request_size_bytes: int = 30 * 1024 * 1024  # 30MB

    # Rate limiting
    rate_limit_enabled: bool = False
    rate_limit_storage_uri: str = "memory://"
    rate_limit_convert_per_minute: int = 30
    rate_limit_general_per_minute: int = 100

    # Optional text rewriting before PDF synthesis
    anthropic_api_key: str = ""
    rewrite_enabled: bool = False
    rewrite_model: str = "claude-haiku-4-5-20251001"
    rewrite_max_tokens: int = 8192

    # Assets
    fonts_dir: str = "public/fonts"
    default_logo_url: str = ""
    logo_fetch_timeout_seconds: float = 15.0
    max_logo_size_bytes: int = 5 * 1024 * 1024  # 5MB

    # House style
    footer_main: str = "© 2026 ALETHRA™. All rights reserved."
    footer_sub: str = "Confidential – Not for distribution without written authorization."
    confidential_text: str = "Confidential, Restricted Distribution\nVersion 1.0 – March 2026"
    brand_tokens: list[str] = ["alethra"]
    centered_notice_keywords: list[str] = ["confidential"]
    front_matter_blocks: int = 4

    @field_validator("brand_tokens", "centered_notice_keywords", mode="after")
    @classmethod
    def normalize_tokens(cls, v: list[str]) -> list[str]:
        """Lower-case and drop blank entries so matching is case-insensitive."""
        return [token.strip().lower() for token in v if token.strip()]

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
