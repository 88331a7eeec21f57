"""
Application configuration from environment variables.
"""

import os


class Config:
    """Application configuration from environment variables."""

    # Ecwid
    ECWID_STORE_ID: str = os.getenv('ECWID_STORE_ID', '')
    ECWID_API_KEY: str = os.getenv('ECWID_API_KEY', '')

    # Webhooks
    ECWID_REVALIDATION_SECRET: str = os.getenv('ECWID_REVALIDATION_SECRET', '')

    # Application
    API_TIMEOUT: int = int(os.getenv('API_TIMEOUT', '10'))
    CACHE_TTL: int = int(os.getenv('CACHE_TTL', '43200'))
    CACHE_MAX_SIZE: int = int(os.getenv('CACHE_MAX_SIZE', '512'))

    # Logging
    LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO')
    LOG_FILE: str = os.getenv('LOG_FILE', '/tmp/ecwid_storefront.log')

    @classmethod
    def validate(cls) -> None:
        """
        Validate required configuration on startup.

        Raises:
            ValueError: If required variables missing
        """
        required = [
            'ECWID_STORE_ID',
            'ECWID_API_KEY',
            'ECWID_REVALIDATION_SECRET'
        ]

        missing = [key for key in required if not getattr(cls, key)]

        if missing:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing)}"
            )
