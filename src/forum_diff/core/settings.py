"""Application settings and configuration.

This module defines all configuration options for the Forum Diff service.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from forum_diff.utils.sanitize import sanitize_float, sanitize_int


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Forum Diff", alias="APP_NAME")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./forum_diff.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # JWT authentication settings
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 30,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Diff rendering
    diff_neighbor_lines: int | str = Field(default=2, alias="DIFF_NEIGHBOR_LINES")
    diff_detail_level: str = Field(default="line", alias="DIFF_DETAIL_LEVEL")
    diff_separate_block: bool = Field(default=True, alias="DIFF_SEPARATE_BLOCK")
    # Kept raw; clamped into [0, 1] when the renderer options are built.
    diff_merge_threshold: float | str = Field(default=0.8, alias="DIFF_MERGE_THRESHOLD")
    diff_text_formatting: bool = Field(default=True, alias="DIFF_TEXT_FORMATTING")
    diff_no_diff_message: str = Field(
        default="There are no differences between these revisions.",
        alias="DIFF_NO_DIFF_MESSAGE",
    )
    diff_page_limit: int = Field(default=20, alias="DIFF_PAGE_LIMIT")
    diff_page_max: int = Field(default=50, alias="DIFF_PAGE_MAX")

    # Revision archiving
    archive_enabled: bool = Field(default=True, alias="DIFF_ARCHIVE_ENABLED")
    archive_keep_recent: int = Field(default=5, alias="DIFF_ARCHIVE_KEEP_RECENT")
    archive_chunk_size: int = Field(default=20, alias="DIFF_ARCHIVE_CHUNK_SIZE")

    # Companion features switched on for this installation (e.g. "quiet-edits")
    enabled_extensions: list[str] = Field(default=[], alias="ENABLED_EXTENSIONS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling such as Alembic."""
        url = self.effective_database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url

    @property
    def neighbor_lines(self) -> int:
        """Context lines around each change; malformed values fall back to 2."""
        return sanitize_int(self.diff_neighbor_lines, default=2)

    @property
    def merge_threshold(self) -> float:
        """Merge threshold for the combined renderer, clamped into [0, 1]."""
        return sanitize_float(self.diff_merge_threshold, default=0.8)


class QuietEditsSettings(BaseSettings):
    """Settings owned by the companion "quiet edits" feature.

    They live in their own namespace and only take effect while the feature is
    listed in ``Settings.enabled_extensions``.
    """

    ignore_case: bool = Field(default=True, alias="QUIET_EDITS_IGNORE_CASE")
    ignore_whitespace: bool = Field(default=True, alias="QUIET_EDITS_IGNORE_WHITESPACE")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()  # type: ignore[call-arg]
quiet_edits_settings = QuietEditsSettings()
