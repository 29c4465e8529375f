"""Screen sessions: validate, apply, persist and score emit_screen calls."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from screen_stack.config import ScreenConfig
from screen_stack.models.history import InteractionMetadata, RevisionMetadata
from screen_stack.quality.gate import evaluate_document
from screen_stack.screen.ledger import MutationAccepted, MutationResult, RevisionLedger
from screen_stack.screen.validation import validate_mutation

if TYPE_CHECKING:
    from collections.abc import Mapping

    from screen_stack.history.log import HistoryLog, PersistResult
    from screen_stack.models.quality import QualityResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EmitOutcome:
    """Result of one emit_screen call, including best-effort side effects."""

    result: MutationResult
    persisted: PersistResult | None = None
    quality: QualityResult | None = None

    @property
    def ok(self) -> bool:
        return self.result.ok


class ScreenSession:
    """One screen document and its ledger, owned by a single UI session."""

    def __init__(
        self,
        session_id: str,
        *,
        history: HistoryLog | None = None,
        config: ScreenConfig | None = None,
    ) -> None:
        self.session_id = session_id
        self.ledger = RevisionLedger()
        self._history = history
        self._config = config or ScreenConfig()
        self._lock = asyncio.Lock()

    async def emit(
        self,
        payload: Mapping[str, Any] | None,
        *,
        tool_call_id: str | None = None,
        interaction: InteractionMetadata | None = None,
    ) -> EmitOutcome:
        """Handle one emit_screen tool call.

        Raises ``MutationValidationError`` for malformed payloads. Apply-time
        failures are returned in the outcome for the generator to correct.
        """
        mutation = validate_mutation(
            payload,
            max_html_chars=self._config.max_html_chars,
            max_revision_note_chars=self._config.max_revision_note_chars,
        )
        async with self._lock:
            result = self.ledger.accept(mutation, tool_call_id=tool_call_id)
            if not isinstance(result, MutationAccepted):
                return EmitOutcome(result=result)

            persisted = None
            if self._history is not None:
                persisted = await self._history.persist(
                    result.event.revision,
                    result.event.document,
                    RevisionMetadata(
                        session_id=self.session_id,
                        tool_call_id=tool_call_id,
                        app_context=mutation.app_context,
                        is_final=mutation.is_final,
                        revision_note=mutation.revision_note,
                        interaction=interaction or InteractionMetadata(),
                    ),
                )

        quality = None
        if mutation.is_final:
            quality = evaluate_document(result.event.document, mutation.app_context)
            if not quality.passed:
                logger.info(
                    "Quality gate failed — session=%s revision=%d score=%.3f reasons=%s",
                    self.session_id,
                    result.event.revision,
                    quality.score,
                    ",".join(quality.reason_codes),
                )
        return EmitOutcome(result=result, persisted=persisted, quality=quality)

    def read_screen(self, mode: str = "meta") -> dict[str, Any]:
        return self.ledger.read_screen(mode)


class ScreenRegistry:
    """Maps UI session ids to their screen sessions."""

    def __init__(
        self,
        *,
        history: HistoryLog | None = None,
        config: ScreenConfig | None = None,
    ) -> None:
        self._history = history
        self._config = config or ScreenConfig()
        self._sessions: dict[str, ScreenSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, session_id: str) -> ScreenSession | None:
        return self._sessions.get(session_id)

    def get_or_create(self, session_id: str) -> ScreenSession:
        session = self._sessions.get(session_id)
        if session is None:
            session = ScreenSession(
                session_id, history=self._history, config=self._config
            )
            self._sessions[session_id] = session
            logger.info("Screen session created — session=%s", session_id)
        return session

    def discard(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None
