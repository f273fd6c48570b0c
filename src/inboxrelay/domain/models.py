"""Domain models for Inbox Relay."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr

BODY_MAX_CHARS = 1000


class ChangeEvent(BaseModel):
    """Mailbox change notification decoded from a push envelope."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    account_id: StrictStr = Field(alias="emailAddress")
    cursor: StrictStr | StrictInt = Field(alias="historyId")

    @property
    def cursor_str(self) -> str:
        return str(self.cursor)


class MessageDetails(BaseModel):
    """Normalized view of a provider message."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    thread_id: str = Field(default="", alias="threadId")
    subject: str = ""
    sender: str = Field(default="", alias="from")
    to: str = ""
    date: str = ""
    snippet: str = ""
    body: str | None = Field(default=None, max_length=BODY_MAX_CHARS)


class MessageRecord(MessageDetails):
    """A message as persisted in the bounded store."""

    received_at: str = Field(alias="receivedAt")
    history_id: str | int = Field(alias="historyId")

    @classmethod
    def from_details(
        cls,
        details: MessageDetails,
        received_at: str,
        history_id: str | int,
    ) -> MessageRecord:
        return cls(
            **details.model_dump(),
            received_at=received_at,
            history_id=history_id,
        )

    def to_api(self) -> dict:
        """Serialize with the camelCase keys used on the wire and in storage."""
        return self.model_dump(by_alias=True)


class StoreStats(BaseModel):
    """Summary of the bounded store contents."""

    model_config = ConfigDict(populate_by_name=True)

    total_count: int = Field(default=0, alias="totalCount")
    newest_date: str | None = Field(default=None, alias="newestDate")
    oldest_date: str | None = Field(default=None, alias="oldestDate")
    last_received_at: str | None = Field(default=None, alias="lastReceivedAt")

    def to_api(self) -> dict:
        return self.model_dump(by_alias=True)
