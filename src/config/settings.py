"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use DECK_ prefix (e.g., DECK_DEFAULT_THEME=monokai).

Settings can also be loaded from a .env file in the project root.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use DECK_ prefix.

    Examples:
        DECK_DEFAULT_THEME=monokai
        DECK_PORT=8080
        DECK_WATCH_DEBOUNCE=0.5
    """

    model_config = SettingsConfigDict(
        env_prefix="DECK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Rendering configuration
    default_theme: str = Field(
        default="base16-ocean.dark",
        description="Theme used for code highlighting when none is requested",
    )

    output_filename: str = Field(
        default="index.html",
        description="Name of the document written by the build command",
    )

    # Server configuration
    host: str = Field(
        default="127.0.0.1",
        description="Interface the preview server binds to",
    )

    port: int = Field(
        default=3030,
        description="Port the preview server listens on",
    )

    slides_path: str = Field(
        default="/slides",
        description="HTTP path serving the rendered deck",
    )

    push_path: str = Field(
        default="/ws",
        description="HTTP path upgraded to the reload push channel",
    )

    # Watcher configuration
    watch_debounce: float = Field(
        default=0.25,
        ge=0.0,
        description="Quiet period (seconds) used to coalesce bursts of file modifications",
    )

    def slidesUrl_make(self, host: str, port: int, watch: bool) -> str:
        """
        Build the URL a browser should open to view the deck.

        Args:
            host: Bound interface
            port: Bound port
            watch: Whether live reload is active

        Returns:
            URL string, with ?watch=true when live reload is active

        Example:
            >>> AppSettings().slidesUrl_make("127.0.0.1", 3030, True)
            'http://127.0.0.1:3030/slides?watch=true'
        """
        url = f"http://{host}:{port}{self.slides_path}"
        if watch:
            url += "?watch=true"
        return url


# Singleton instance - import this in your code
appsettings = AppSettings()
