"""Authentication module for loading Instapaper credentials.

This module handles loading the OAuth consumer pair and the account's access
token pair from environment variables using python-dotenv. Obtaining the
access token (the xAuth exchange) happens outside this tool.
"""

import os
from typing import NamedTuple

from dotenv import load_dotenv

from .errors import MissingCredentialsError
from .models import AccessToken


class Credentials(NamedTuple):
    """Instapaper OAuth credentials."""
    consumer_key: str
    consumer_secret: str
    token: AccessToken


class Authenticator:
    """Loads and validates Instapaper credentials from environment variables.

    Credentials are loaded from a .env file using python-dotenv and are never
    cached or logged.

    Required environment variables:
        INSTAPAPER_CONSUMER_KEY: OAuth consumer key of the application
        INSTAPAPER_CONSUMER_SECRET: OAuth consumer secret of the application
        INSTAPAPER_TOKEN_KEY: Access token key of the connected account
        INSTAPAPER_TOKEN_SECRET: Access token secret of the connected account

    Example:
        >>> auth = Authenticator()
        >>> creds = auth.get_credentials()
    """

    ENV_VARS = (
        'INSTAPAPER_CONSUMER_KEY',
        'INSTAPAPER_CONSUMER_SECRET',
        'INSTAPAPER_TOKEN_KEY',
        'INSTAPAPER_TOKEN_SECRET',
    )

    def __init__(self):
        """Initialize the authenticator by loading environment variables from .env file."""
        load_dotenv()

    def get_credentials(self) -> Credentials:
        """Get Instapaper credentials from environment variables.

        Returns:
            Credentials: consumer pair and access token

        Raises:
            MissingCredentialsError: If any required variable is missing
        """
        values = {name: os.getenv(name) for name in self.ENV_VARS}
        missing = [name for name, value in values.items() if not value]
        if missing:
            raise MissingCredentialsError(missing)

        return Credentials(
            consumer_key=values['INSTAPAPER_CONSUMER_KEY'],  # type: ignore[arg-type]
            consumer_secret=values['INSTAPAPER_CONSUMER_SECRET'],  # type: ignore[arg-type]
            token=AccessToken(
                key=values['INSTAPAPER_TOKEN_KEY'],  # type: ignore[arg-type]
                secret=values['INSTAPAPER_TOKEN_SECRET'],  # type: ignore[arg-type]
            ),
        )
