"""Screen document patch engine and revision ledger."""

from screen_stack.screen.ledger import (
    LedgerState,
    MutationAccepted,
    MutationRejected,
    RevisionLedger,
    accept_mutation,
)
from screen_stack.screen.patch import PatchApplyError, apply_patch
from screen_stack.screen.scanner import NodeSpan, locate
from screen_stack.screen.validation import MutationValidationError, validate_mutation

__all__ = [
    "LedgerState",
    "MutationAccepted",
    "MutationRejected",
    "MutationValidationError",
    "NodeSpan",
    "PatchApplyError",
    "RevisionLedger",
    "accept_mutation",
    "apply_patch",
    "locate",
    "validate_mutation",
]
