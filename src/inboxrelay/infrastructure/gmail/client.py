"""Gmail implementation of the MailProvider port."""

from __future__ import annotations

from typing import Any, Callable

from googleapiclient.discovery import Resource, build
from googleapiclient.errors import HttpError
from loguru import logger

from inboxrelay.exceptions import ReconciliationError
from inboxrelay.infrastructure.gmail.auth import credentials_from_settings
from inboxrelay.infrastructure.settings import Settings, get_settings

# Gmail caps history.list pages at 500 entries
HISTORY_PAGE_SIZE = 500


class GmailProvider:
    """Thin wrapper over the Gmail v1 API exposing the calls reconciliation needs.

    The API service is built lazily on first use so the application can start
    (and serve the read API) without Google credentials configured. Every
    Gmail error is re-raised as ReconciliationError.

    Args:
        settings: Application settings holding the OAuth client and refresh token.
        service_factory: Returns a Gmail API ``Resource``. Defaults to building
            one from the configured credentials; tests pass a mock.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        service_factory: Callable[[], Resource] | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.user_id = self.settings.gmail_user_id
        self._service_factory = service_factory or self._build_service
        self._service: Resource | None = None

    def _build_service(self) -> Resource:
        creds = credentials_from_settings(self.settings)
        logger.info("Gmail API client initialized")
        return build("gmail", "v1", credentials=creds, cache_discovery=False)

    @property
    def service(self) -> Resource:
        if self._service is None:
            self._service = self._service_factory()
        return self._service

    def get_profile(self) -> dict[str, Any]:
        """Return the authenticated mailbox profile (emailAddress, historyId, ...)."""
        return self._execute(
            "users.getProfile",
            lambda: self.service.users().getProfile(userId=self.user_id),
        )

    def list_history(self, start_cursor: str) -> list[dict[str, Any]]:
        """Return all messageAdded history entries since start_cursor, across pages."""
        entries: list[dict[str, Any]] = []
        page_token: str | None = None

        while True:
            kwargs: dict[str, Any] = {
                "userId": self.user_id,
                "startHistoryId": start_cursor,
                "historyTypes": ["messageAdded"],
                "maxResults": HISTORY_PAGE_SIZE,
            }
            if page_token:
                kwargs["pageToken"] = page_token

            response = self._execute(
                "users.history.list",
                lambda: self.service.users().history().list(**kwargs),
            )
            entries.extend(response.get("history", []))

            page_token = response.get("nextPageToken")
            if not page_token:
                break

        logger.debug(f"history.list since {start_cursor}: {len(entries)} entries")
        return entries

    def get_message(self, message_id: str) -> dict[str, Any]:
        """Fetch a message in full format."""
        return self._execute(
            "users.messages.get",
            lambda: self.service.users().messages().get(
                userId=self.user_id, id=message_id, format="full"
            ),
        )

    def list_messages(
        self,
        query: str = "",
        label_ids: list[str] | None = None,
        max_results: int = 1,
    ) -> list[str]:
        """Return ids of messages matching the search query, newest first."""
        kwargs: dict[str, Any] = {
            "userId": self.user_id,
            "maxResults": max_results,
        }
        if query:
            kwargs["q"] = query
        if label_ids:
            kwargs["labelIds"] = label_ids

        response = self._execute(
            "users.messages.list",
            lambda: self.service.users().messages().list(**kwargs),
        )
        return [m["id"] for m in response.get("messages", []) if m.get("id")]

    def _execute(self, operation: str, make_request: Callable[[], Any]) -> dict[str, Any]:
        try:
            return make_request().execute()
        except HttpError as e:
            raise ReconciliationError(f"Gmail {operation} failed: {e}") from e
        except ReconciliationError:
            raise
        except Exception as e:
            raise ReconciliationError(f"Gmail {operation} failed: {e}") from e
