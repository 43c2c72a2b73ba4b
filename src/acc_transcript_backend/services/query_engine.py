"""
Authorization-scoped transcript queries.

Every operation starts from the caller's visible set (the whole store for a
wildcard scope, otherwise only transcripts of permitted clients) and then
applies its own filters. Operations never modify the store.

Key behaviours:
- searchTranscripts: case-insensitive substring match on transcript content,
  optional explicit client filter (denied if outside the caller's scope).
  ``dateFrom``/``dateTo`` are accepted for compatibility and currently ignored.
- getTranscriptDetails: lookup across the whole store so a missing id
  (NotFound) is distinguishable from a forbidden one (AccessDenied).
- listRecentCalls: first ``limit`` visible transcripts in store order, which
  is treated as most-recent-first. No date sort is applied.
"""

import logging
import math
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from acc_transcript_backend.auth import can_access_client
from acc_transcript_backend.errors import (
    AccessDenied,
    ErrorKind,
    InvalidArgument,
    NotFound,
    QueryError,
    Unauthenticated,
    UnknownOperation,
)
from acc_transcript_backend.models.transcript import Transcript
from acc_transcript_backend.models.user import CallerIdentity
from acc_transcript_backend.transcript_store import TranscriptStore

logger = logging.getLogger(__name__)

SEARCH_TRANSCRIPTS = "searchTranscripts"
GET_TRANSCRIPT_DETAILS = "getTranscriptDetails"
LIST_RECENT_CALLS = "listRecentCalls"

DEFAULT_RECENT_LIMIT = 10
MAX_RECENT_LIMIT = 100


def normalize_limit(value: Any) -> int:
    """
    Coerce a caller-supplied limit into [1, MAX_RECENT_LIMIT].

    Missing, boolean, non-numeric and non-positive values fall back to
    DEFAULT_RECENT_LIMIT. Floats and numeric strings are truncated.
    """
    if value is None or isinstance(value, bool):
        return DEFAULT_RECENT_LIMIT

    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return DEFAULT_RECENT_LIMIT

    if isinstance(value, float):
        if math.isnan(value):
            return DEFAULT_RECENT_LIMIT
        if math.isinf(value):
            return MAX_RECENT_LIMIT if value > 0 else DEFAULT_RECENT_LIMIT
        value = int(value)

    if not isinstance(value, int):
        return DEFAULT_RECENT_LIMIT

    if value <= 0:
        return DEFAULT_RECENT_LIMIT
    return min(value, MAX_RECENT_LIMIT)


class SearchTranscriptsArgs(BaseModel):
    """Arguments for searchTranscripts."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    query: str = Field(description="Case-insensitive substring to look for; empty matches everything")
    client_filter: Optional[str] = Field(default=None, alias="clientFilter")
    # Accepted but not applied
    date_from: Optional[str] = Field(default=None, alias="dateFrom")
    date_to: Optional[str] = Field(default=None, alias="dateTo")


class GetTranscriptDetailsArgs(BaseModel):
    """Arguments for getTranscriptDetails."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    transcript_id: str = Field(alias="transcriptId")


class ListRecentCallsArgs(BaseModel):
    """Arguments for listRecentCalls. ``limit`` defaults to 10 and is clamped to [1, 100]."""

    model_config = ConfigDict(frozen=True)

    limit: int = Field(default=DEFAULT_RECENT_LIMIT)

    @field_validator("limit", mode="before")
    @classmethod
    def clamp_limit(cls, value: Any) -> int:
        return normalize_limit(value)


class OperationResponse(BaseModel):
    """Structured outcome of an operation; exactly one of results/result/kind is set."""

    model_config = ConfigDict(frozen=True)

    ok: bool
    results: Optional[Tuple[Transcript, ...]] = None
    result: Optional[Transcript] = None
    kind: Optional[ErrorKind] = None
    message: Optional[str] = None

    @classmethod
    def success_list(cls, transcripts: List[Transcript]) -> "OperationResponse":
        return cls(ok=True, results=tuple(transcripts))

    @classmethod
    def success_one(cls, transcript: Transcript) -> "OperationResponse":
        return cls(ok=True, result=transcript)

    @classmethod
    def failure(cls, error: QueryError) -> "OperationResponse":
        return cls(ok=False, kind=error.kind, message=error.message)

    def payload(self) -> Any:
        """The transcript data of a successful response in wire form."""
        if self.results is not None:
            return [t.to_wire() for t in self.results]
        if self.result is not None:
            return self.result.to_wire()
        return None

    def to_wire(self) -> Dict[str, Any]:
        if not self.ok:
            return {"ok": False, "kind": self.kind.value, "message": self.message}
        if self.results is not None:
            return {"ok": True, "results": self.payload()}
        return {"ok": True, "result": self.payload()}


class QueryEngine:
    """Runs the three transcript operations against a read-only store."""

    def __init__(self, store: TranscriptStore):
        self.store = store
        self._operations: Dict[str, Tuple[Type[BaseModel], Callable[..., Any]]] = {
            SEARCH_TRANSCRIPTS: (SearchTranscriptsArgs, self.search_transcripts),
            GET_TRANSCRIPT_DETAILS: (GetTranscriptDetailsArgs, self.get_transcript_details),
            LIST_RECENT_CALLS: (ListRecentCallsArgs, self.list_recent_calls),
        }

    def visible_set(self, identity: CallerIdentity) -> List[Transcript]:
        """Transcripts the identity may see, in store order."""
        if identity.has_wildcard:
            return list(self.store)
        return [t for t in self.store if can_access_client(identity, t.client_name)]

    def search_transcripts(
        self, identity: CallerIdentity, args: SearchTranscriptsArgs
    ) -> List[Transcript]:
        results = self.visible_set(identity)

        if args.query:
            needle = args.query.lower()
            results = [t for t in results if needle in t.content.lower()]

        if args.client_filter:
            if not can_access_client(identity, args.client_filter):
                logger.warning(
                    f"{identity.email} requested client filter outside scope: {args.client_filter}"
                )
                raise AccessDenied(f"You don't have access to {args.client_filter}")
            results = [t for t in results if t.client_name == args.client_filter]

        if args.date_from or args.date_to:
            logger.debug(
                f"Ignoring date range {args.date_from!r}..{args.date_to!r}: date filtering is not supported"
            )

        return results

    def get_transcript_details(
        self, identity: CallerIdentity, args: GetTranscriptDetailsArgs
    ) -> Transcript:
        # Whole-store lookup first so existence is checked before scope
        transcript = self.store.get(args.transcript_id)
        if transcript is None:
            raise NotFound("Transcript not found")

        if not can_access_client(identity, transcript.client_name):
            logger.warning(
                f"{identity.email} denied access to {transcript.id} ({transcript.client_name})"
            )
            raise AccessDenied(f"You don't have access to {transcript.client_name}")

        return transcript

    def list_recent_calls(
        self, identity: CallerIdentity, args: ListRecentCallsArgs
    ) -> List[Transcript]:
        return self.visible_set(identity)[:args.limit]

    def parse_arguments(self, operation: str, arguments: Any) -> BaseModel:
        """Validate raw transport arguments into the operation's argument model."""
        if operation not in self._operations:
            raise UnknownOperation(f"Unknown tool: {operation}")

        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            raise InvalidArgument("Tool arguments must be a JSON object")

        args_model, _ = self._operations[operation]
        try:
            return args_model.model_validate(dict(arguments))
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in err['loc']) or 'arguments'}: {err['msg']}"
                for err in e.errors()
            )
            raise InvalidArgument(f"Invalid arguments for {operation}: {problems}") from e

    def execute(
        self,
        operation: str,
        arguments: Any,
        identity: Optional[CallerIdentity],
    ) -> OperationResponse:
        """
        Run an operation by name and return a structured outcome.

        Args:
            operation: Operation name as exposed to callers
            arguments: Raw argument object from the transport (may be None)
            identity: Authenticated caller, or None when authentication failed

        Returns:
            OperationResponse; failures are reported through ``kind``/``message``
        """
        try:
            if identity is None:
                raise Unauthenticated("Authentication required for tool execution")

            args = self.parse_arguments(operation, arguments)
            logger.info(f"[TOOL] {identity.email} calling {operation}")

            _, handler = self._operations[operation]
            outcome = handler(identity, args)
        except QueryError as e:
            logger.info(f"[TOOL] {operation} failed: {e.kind.value}: {e.message}")
            return OperationResponse.failure(e)

        if isinstance(outcome, Transcript):
            return OperationResponse.success_one(outcome)
        return OperationResponse.success_list(outcome)
