"""Infrastructure modules for the Car Bazar backend.

Centralized infrastructure components:
- configuration: Settings management (Settings and its sections)
- logging: structlog setup, request context, processors
- operations: Operation results and provider error classification
- attachments: Staging of uploads and publishing to the media bucket
- notifications: Channel senders (SMTP email, Twilio WhatsApp)
- services: Dependency injection providers (get_settings, SettingsDep)

Import from the subpackages directly; this package keeps no top-level
exports so that importing one component never loads the others.
"""
