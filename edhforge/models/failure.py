"""
Failure classification for the deck engine.

Every failure the engine reports is a KnownError subclass carrying a
FailureKind and a user-appropriate message. None of them is fatal: the
caller surfaces the message and the user retries or adjusts.

Families:
- DeckRuleError: a deck-construction rule rejected a command. Deck state
  is left exactly as it was before the command.
- CatalogError: the card catalog could not answer a search or lookup.
- PersistenceError: the deck backend rejected or failed a request. The
  in-memory deck is preserved so the save can be retried.
- AuthError: login or registration failed.
"""

from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Deck construction rules
    NO_COMMANDER_SELECTED = "no_commander_selected"
    NOT_ELIGIBLE_TYPE = "not_eligible_type"
    ILLEGAL_IN_FORMAT = "illegal_in_format"
    OUTSIDE_COLOR_IDENTITY = "outside_color_identity"
    DUPLICATE_NON_BASIC = "duplicate_non_basic"
    MISSING_DECK_NAME = "missing_deck_name"

    # Catalog failures
    CATALOG_QUERY_FAILED = "catalog_query_failed"
    CATALOG_UNAVAILABLE = "catalog_unavailable"
    INVALID_PAYLOAD = "invalid_payload"

    # Persistence failures
    DECK_VALIDATION_FAILED = "deck_validation_failed"
    PERSISTENCE_FAILED = "persistence_failed"
    SAVE_IN_PROGRESS = "save_in_progress"

    # Authentication
    AUTH_FAILED = "auth_failed"


class FailureDetail(BaseModel):
    """Detailed information about a failure, ready for display."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        super().__init__(message)

    def to_detail(self) -> FailureDetail:
        """Convert to a FailureDetail for display."""
        return FailureDetail(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


class DeckRuleError(KnownError):
    """
    Raised when a deck-construction rule rejects a command.

    Always recoverable locally; the deck is unchanged.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        card_name: str | None = None,
        suggestion: str | None = None,
    ):
        self.card_name = card_name
        super().__init__(kind=kind, message=message, detail=card_name, suggestion=suggestion)


class CatalogError(KnownError):
    """Raised when the card catalog cannot answer a request."""

    def __init__(
        self,
        message: str,
        kind: FailureKind = FailureKind.CATALOG_QUERY_FAILED,
        status_code: int | None = None,
    ):
        self.status_code = status_code
        super().__init__(
            kind=kind,
            message=message,
            detail=f"HTTP {status_code}" if status_code is not None else None,
            suggestion="Check the search text and try again.",
        )


class PersistenceError(KnownError):
    """
    Raised when the deck backend rejects or fails a request.

    Attributes:
        messages: Individual human-readable errors. A deck-shape validation
            failure yields one message per violated rule; any other failure
            yields a single opaque message.
    """

    def __init__(
        self,
        message: str,
        messages: list[str] | None = None,
        kind: FailureKind = FailureKind.PERSISTENCE_FAILED,
        status_code: int | None = None,
    ):
        self.messages = messages if messages is not None else [message]
        self.status_code = status_code
        super().__init__(
            kind=kind,
            message=message,
            detail="; ".join(self.messages),
            suggestion="Your deck has not been lost. Fix the issues and save again.",
        )


class SaveInProgressError(PersistenceError):
    """Raised when a save is requested while another is outstanding."""

    def __init__(self) -> None:
        super().__init__(
            message="A save for this deck is already in progress.",
            kind=FailureKind.SAVE_IN_PROGRESS,
        )


class AuthError(KnownError):
    """Raised when login or registration fails."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(kind=FailureKind.AUTH_FAILED, message=message)
