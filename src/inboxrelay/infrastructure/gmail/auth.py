from __future__ import annotations

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials

from inboxrelay.exceptions import ProviderAuthError
from inboxrelay.infrastructure.settings import Settings


def credentials_from_settings(settings: Settings) -> Credentials:
    """
    Build refreshable user credentials from the configured OAuth client and
    refresh token. The refresh token is obtained out of band; this only
    exchanges it for an access token.
    """
    if not settings.gmail_configured:
        raise ProviderAuthError(
            "Gmail credentials not configured: set GOOGLE_CLIENT_ID, "
            "GOOGLE_CLIENT_SECRET and GOOGLE_REFRESH_TOKEN"
        )

    creds = Credentials(
        token=None,
        refresh_token=settings.google_refresh_token.get_secret_value(),
        client_id=settings.google_client_id,
        client_secret=settings.google_client_secret.get_secret_value(),
        token_uri=settings.google_token_uri,
    )

    try:
        creds.refresh(Request())
    except GoogleAuthError as e:
        raise ProviderAuthError(f"Gmail token refresh failed: {e}") from e

    return creds
