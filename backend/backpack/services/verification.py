import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from backpack.core.config import settings
from backpack.core.errors import TransitionNotAllowed, ValidationError, VisitorNotFound
from backpack.models.visitor import VerificationStatus
from backpack.services.record_store import RecordStore

logger = logging.getLogger(__name__)


class VerificationAction(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"

    @property
    def target_status(self) -> VerificationStatus:
        return ACTION_TARGETS[self]


ACTION_TARGETS = {
    VerificationAction.APPROVE: VerificationStatus.APPROVED,
    VerificationAction.REJECT: VerificationStatus.REJECTED,
}


@dataclass
class VerificationResult:
    visitor_id: int
    status: VerificationStatus
    phone: Optional[str]

    @property
    def message(self) -> str:
        return f"Visitor with ID {self.visitor_id} was {self.status.value}."

    @property
    def should_notify(self) -> bool:
        # Approved visitors get an out-of-band message from the admin UI
        return self.status is VerificationStatus.APPROVED and bool(self.phone)


class VerificationWorkflow:
    """
    pending -> approved | rejected, driven by admin actions.

    By default the transition is unconditional: re-applying or contradicting a
    previous action rewrites the status (last write wins). With
    allow_retransition=False, a visitor that already left pending is locked.
    """

    def __init__(self, store: RecordStore, allow_retransition: Optional[bool] = None):
        self.store = store
        if allow_retransition is None:
            allow_retransition = settings.VERIFICATION_ALLOW_RETRANSITION
        self.allow_retransition = allow_retransition

    @staticmethod
    def parse_action(action) -> VerificationAction:
        try:
            return VerificationAction(action)
        except ValueError:
            raise ValidationError(f"Unknown action: {action!r}. Use 'approve' or 'reject'.")

    def apply(self, visitor_id: int, action) -> VerificationResult:
        verification_action = self.parse_action(action)
        target = verification_action.target_status

        visitor = self.store.get_visitor(visitor_id)
        if visitor is None:
            raise VisitorNotFound(f"Visitor with ID {visitor_id} not found.")

        current = VerificationStatus(visitor.verification_status)
        if current.is_terminal and not self.allow_retransition:
            raise TransitionNotAllowed(f"Visitor with ID {visitor_id} was already {current.value}.")

        visitor = self.store.update_visitor_status(visitor_id, target)
        logger.info(f"✅ Visitor {visitor_id}: {current.value} -> {target.value}")

        return VerificationResult(visitor_id=visitor.id, status=target, phone=visitor.phone)
