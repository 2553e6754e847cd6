"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use CARDMACROS_ prefix (e.g., CARDMACROS_MAX_INCLUDE_DEPTH=8).

Settings can also be loaded from a .env file in the project root.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use CARDMACROS_ prefix.

    Examples:
        CARDMACROS_RAW_TOKEN_PREFIX=__RAW_
        CARDMACROS_MAX_LEVEL_OFFSET=4
        CARDMACROS_INCLUDE_CYCLE_GUARD=false
    """

    model_config = SettingsConfigDict(
        env_prefix="CARDMACROS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Raw block extraction
    raw_token_prefix: str = Field(
        default="\x00RAW_",
        description="Prefix for raw block sentinels (uses null byte to avoid collisions)",
    )

    raw_token_suffix: str = Field(
        default="\x00",
        description="Suffix for raw block sentinels (uses null byte to avoid collisions)",
    )

    # Placeholder tags
    placeholder_key_prefix: str = Field(
        default="macro-",
        description="Prefix of the key attribute carried by every placeholder tag",
    )

    # Include macro
    max_level_offset: int = Field(
        default=5,
        ge=0,
        description="Largest heading level shift an include may apply (AsciiDoc has six section levels)",
    )

    max_include_depth: int = Field(
        default=16,
        ge=1,
        description="Deepest include nesting allowed when the cycle guard is on",
    )

    include_cycle_guard: bool = Field(
        default=True,
        description="Reject includes that revisit a card already on the include chain",
    )

    # Logging
    verbosity: int = Field(
        default=1,
        ge=0,
        description="Default LOG() verbosity when no generation context is connected",
    )

    def rawToken_make(self, index: int) -> str:
        """
        Generate the sentinel string for the raw block at given index.

        Args:
            index: Zero-based index of the raw block in its document

        Returns:
            Sentinel string (e.g., "\\x00RAW_0\\x00")

        Example:
            >>> settings = AppSettings()
            >>> settings.rawToken_make(0)
            '\\x00RAW_0\\x00'
        """
        return f"{self.raw_token_prefix}{index}{self.raw_token_suffix}"

    def placeholderKey_make(self, index: int) -> str:
        """Generate the placeholder key for a counter value (e.g., "macro-7")."""
        return f"{self.placeholder_key_prefix}{index}"


# Singleton instance - import this in your code
appsettings = AppSettings()
