"""Revision ledger: optimistic-concurrency wrapper around the patch engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Literal

from screen_stack.models.mutation import ApplyErrorCode, Mutation, RenderOutputEvent
from screen_stack.screen.patch import PatchApplyError, apply_patch
from screen_stack.screen.scanner import list_markers

logger = logging.getLogger(__name__)

ReadMode = Literal["meta", "outline", "full"]
READ_MODES: tuple[str, ...] = ("meta", "outline", "full")


@dataclass(frozen=True, slots=True)
class LedgerState:
    revision_count: int = 0
    latest_document: str = ""
    last_is_final: bool = False


@dataclass(frozen=True, slots=True)
class MutationAccepted:
    state: LedgerState
    event: RenderOutputEvent
    acknowledgment: str

    ok: Literal[True] = True


@dataclass(frozen=True, slots=True)
class MutationRejected:
    code: ApplyErrorCode
    message: str

    ok: Literal[False] = False


MutationResult = MutationAccepted | MutationRejected


def _acknowledge(summary: str, revision: int, document: str, mutation: Mutation) -> str:
    final_hint = ", final" if mutation.is_final else ""
    note_hint = f" note='{mutation.revision_note}'" if mutation.revision_note else ""
    return (
        f"{summary} applied at revision {revision} "
        f"({len(document)} chars{final_hint}){note_hint}"
    )


def accept_mutation(
    state: LedgerState,
    mutation: Mutation,
    *,
    tool_name: str = "emit_screen",
    tool_call_id: str | None = None,
) -> MutationResult:
    """Apply ``mutation`` to ``state`` and return the accepted or rejected result.

    ``replace`` always succeeds. Patch ops require an existing document and a
    ``base_revision`` equal to the current revision. The input state is never
    modified; rejected calls leave the caller holding the same state.
    """
    summary = str(mutation.op)
    if not mutation.is_patch:
        document = mutation.html or ""
    else:
        if not state.latest_document.strip():
            return MutationRejected(
                ApplyErrorCode.SCREEN_STATE_UNAVAILABLE,
                "emit_screen patch operation requires existing rendered HTML state.",
            )
        if mutation.base_revision != state.revision_count:
            return MutationRejected(
                ApplyErrorCode.REVISION_MISMATCH,
                f"emit_screen baseRevision mismatch (expected {state.revision_count}, "
                f"got {mutation.base_revision}).",
            )
        try:
            outcome = apply_patch(state.latest_document, mutation)
        except PatchApplyError as exc:
            return MutationRejected(ApplyErrorCode.PATCH_APPLY_FAILED, str(exc))
        document = outcome.document
        summary = outcome.summary

    revision = state.revision_count + 1
    next_state = LedgerState(
        revision_count=revision,
        latest_document=document,
        last_is_final=mutation.is_final,
    )
    event = RenderOutputEvent(
        tool_name=tool_name,
        tool_call_id=tool_call_id,
        revision=revision,
        document=document,
        is_final=mutation.is_final,
        app_context=mutation.app_context,
        revision_note=mutation.revision_note,
        op=mutation.op,
        base_revision=mutation.base_revision,
        target_id=mutation.target_id,
    )
    return MutationAccepted(
        state=next_state,
        event=event,
        acknowledgment=_acknowledge(summary, revision, document, mutation),
    )


class RevisionLedger:
    """Holds the current state of one screen document.

    Single writer: callers serialize ``accept`` calls for a given ledger.
    """

    def __init__(self, state: LedgerState | None = None) -> None:
        self._state = state or LedgerState()

    @property
    def state(self) -> LedgerState:
        return self._state

    @property
    def revision(self) -> int:
        return self._state.revision_count

    @property
    def document(self) -> str:
        return self._state.latest_document

    def accept(
        self,
        mutation: Mutation,
        *,
        tool_name: str = "emit_screen",
        tool_call_id: str | None = None,
    ) -> MutationResult:
        result = accept_mutation(
            self._state, mutation, tool_name=tool_name, tool_call_id=tool_call_id
        )
        if isinstance(result, MutationAccepted):
            self._state = result.state
            logger.debug(
                "Mutation accepted — op=%s revision=%d chars=%d",
                mutation.op,
                result.event.revision,
                len(result.event.document),
            )
        else:
            logger.info(
                "Mutation rejected — op=%s code=%s revision=%d",
                mutation.op,
                result.code,
                self._state.revision_count,
            )
        return result

    def read_screen(self, mode: str = "meta") -> dict[str, Any]:
        """Describe the current document for a generator preparing a patch.

        ``meta`` returns the revision to use as ``baseRevision``; ``outline``
        adds the addressable markers; ``full`` adds the document text.
        """
        if mode not in READ_MODES:
            raise ValueError(
                f"read_screen mode must be one of: {', '.join(READ_MODES)}."
            )
        state = self._state
        result: dict[str, Any] = {
            "meta": {
                "revision": state.revision_count,
                "isFinal": state.last_is_final,
                "htmlChars": len(state.latest_document),
            }
        }
        if mode == "outline":
            result["outline"] = list_markers(state.latest_document)
        elif mode == "full":
            result["html"] = state.latest_document
        return result
