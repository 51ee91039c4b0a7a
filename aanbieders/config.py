"""
Client configuration from environment variables.
"""

import os

from aanbieders.errors import ConfigError
from aanbieders.models import DEFAULT_HOST, ClientConfig, ClientCredentials, OutputMode


class Config:
    """Client configuration from environment variables."""

    # Aanbieders API
    AANBIEDERS_KEY: str = os.getenv('AANBIEDERS_KEY', '')
    AANBIEDERS_SECRET: str = os.getenv('AANBIEDERS_SECRET', '')
    AANBIEDERS_HOST: str = os.getenv('AANBIEDERS_HOST', DEFAULT_HOST)
    AANBIEDERS_OUTPUT_MODE: str = os.getenv('AANBIEDERS_OUTPUT_MODE', OutputMode.RAW.value)

    # Transport
    API_TIMEOUT: int = int(os.getenv('API_TIMEOUT', '10'))

    # Logging
    LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO')
    LOG_FILE: str = os.getenv('LOG_FILE', '')

    @classmethod
    def validate(cls) -> None:
        """
        Validate required configuration on startup.

        Raises:
            ConfigError: If required variables missing or output mode invalid
        """
        required = [
            'AANBIEDERS_KEY',
            'AANBIEDERS_SECRET',
        ]

        missing = [key for key in required if not getattr(cls, key)]

        if missing:
            raise ConfigError(
                f"Missing required environment variables: {', '.join(missing)}"
            )

        OutputMode.parse(cls.AANBIEDERS_OUTPUT_MODE)

    @classmethod
    def client_config(cls) -> ClientConfig:
        """
        Build a ClientConfig from the current settings.

        Returns:
            ClientConfig instance

        Raises:
            ConfigError: If configuration is invalid
        """
        cls.validate()

        return ClientConfig(
            credentials=ClientCredentials(cls.AANBIEDERS_KEY, cls.AANBIEDERS_SECRET),
            base_host=cls.AANBIEDERS_HOST,
            output_mode=OutputMode.parse(cls.AANBIEDERS_OUTPUT_MODE),
            timeout=cls.API_TIMEOUT
        )
