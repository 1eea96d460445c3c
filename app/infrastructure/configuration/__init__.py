"""Infrastructure configuration module - public API.

Centralized configuration management built on Pydantic BaseSettings with
domain-based sections. There is no module level singleton: obtain the
process-wide instance through ``infrastructure.services.get_settings``.

Exports:
    Settings: Main settings class (for testing/overrides)
    SubmissionSettings: Submission feature settings class (for testing)

Example:
    ```python
    from infrastructure.services import get_settings

    settings = get_settings()

    recipients = settings.submissions.EMAIL_RECIPIENTS
    bucket = settings.aws.MEDIA_BUCKET
    ```
"""

from infrastructure.configuration.settings import Settings
from infrastructure.configuration.features.submissions import SubmissionSettings

__all__ = ["Settings", "SubmissionSettings"]
