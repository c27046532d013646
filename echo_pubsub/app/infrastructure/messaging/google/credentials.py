"""Service-account credential loading for the Google subscriber."""
from __future__ import annotations

from google.auth.credentials import AnonymousCredentials, Credentials
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from loguru import logger

from echo_pubsub.app.ports.pubsub_subscriber import CredentialsLoadError


def load_credentials(json_path: str, *, strict: bool = True) -> Credentials:
    """Load service-account credentials from json_path.

    strict=True raises CredentialsLoadError on failure. strict=False logs the
    error and returns anonymous credentials: the subscriber can still be built
    but the broker will reject it once it starts pulling.
    """
    try:
        return service_account.Credentials.from_service_account_file(json_path)
    except (OSError, ValueError, KeyError, GoogleAuthError) as exc:
        if strict:
            raise CredentialsLoadError(f"Could not import Google Pubsub json credentials from {json_path}: {exc}") from exc
        logger.error("Could not import Google Pubsub json credentials: {}", exc)
        return AnonymousCredentials()
