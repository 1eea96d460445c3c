"""Server infrastructure settings."""

from typing import List

from pydantic import Field

from infrastructure.configuration.base import EnvSection


class ServerSettings(EnvSection):
    """Server and application runtime configuration.

    Environment Variables:
        APP_TITLE: Title shown in the OpenAPI documentation
        HOST: Interface uvicorn binds to (default: 0.0.0.0)
        PORT: Port uvicorn listens on (default: 5000)
        SERVER_URL: Public base URL of the API (default: http://localhost:5000)
        CORS_ALLOW_ORIGINS: JSON list of origins
            allowed by CORS (default: ["*"])

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        server_url = settings.server.SERVER_URL
        origins = settings.server.CORS_ALLOW_ORIGINS
        ```
    """

    APP_TITLE: str = Field(default="Maa Bhawani Car Bazar API", alias="APP_TITLE")
    HOST: str = Field(default="0.0.0.0", alias="HOST")
    PORT: int = Field(default=5000, alias="PORT")
    SERVER_URL: str = Field(default="http://localhost:5000", alias="SERVER_URL")
    CORS_ALLOW_ORIGINS: List[str] = Field(
        default_factory=lambda: ["*"], alias="CORS_ALLOW_ORIGINS"
    )
