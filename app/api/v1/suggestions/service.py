import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.rbac import ensure_self_or_admin
from app.auth.schemas import CurrentUser
from app.core.enums import RequestStatus
from app.core.exceptions import ConflictError, NotFoundError
from app.core.models import Suggestion
from app.core.notifications import Notifier, notify_safely
from app.core.schemas import PersonSummary

from .repository import SuggestionRepository
from .schemas import SuggestionCreate, SuggestionResponse

logger = logging.getLogger(__name__)

ALREADY_PROCESSED_MESSAGE = "This suggestion has already been processed"


def _to_response(s: Suggestion) -> SuggestionResponse:
    return SuggestionResponse(
        id=s.id,
        coordinator_id=s.coordinator_id,
        suggestion_text=s.suggestion_text,
        status=s.status,
        admin_comments=s.admin_comments,
        reviewed_by=s.reviewed_by,
        reviewed_at=s.reviewed_at,
        submitted_at=s.submitted_at,
        coordinator=PersonSummary.from_user(s.coordinator),
    )


async def submit_suggestion(
    db: AsyncSession,
    coordinator_id: str,
    payload: SuggestionCreate,
) -> SuggestionResponse:
    repo = SuggestionRepository(db)
    suggestion = Suggestion(
        coordinator_id=coordinator_id,
        suggestion_text=payload.suggestion_text,
        status=RequestStatus.PENDING.value,
    )
    await repo.add(suggestion)
    await db.commit()
    logger.info("Suggestion %s submitted by %s", suggestion.id, coordinator_id)
    saved = await repo.find_by_id(suggestion.id, fresh=True)
    return _to_response(saved)


async def _review_suggestion(
    db: AsyncSession,
    notifier: Notifier,
    suggestion_id: int,
    reviewer: CurrentUser,
    to_status: RequestStatus,
    admin_comments: Optional[str],
) -> SuggestionResponse:
    repo = SuggestionRepository(db)
    suggestion = await repo.find_by_id(suggestion_id)
    if not suggestion:
        raise NotFoundError("Suggestion", suggestion_id)
    if suggestion.status != RequestStatus.PENDING.value:
        raise ConflictError(ALREADY_PROCESSED_MESSAGE)

    if not await repo.transition(suggestion_id, to_status, reviewer.staff_id, admin_comments):
        await db.rollback()
        raise ConflictError(ALREADY_PROCESSED_MESSAGE)
    await db.commit()
    logger.info("Suggestion %s %s by %s", suggestion_id, to_status.value, reviewer.staff_id)

    updated = await repo.find_by_id(suggestion_id, fresh=True)
    if updated.coordinator is not None:
        body = (
            f"Dear {updated.coordinator.full_name},\n\n"
            f"Your suggestion has been {updated.status}.\n\n"
            f"Suggestion: {updated.suggestion_text}"
        )
        if updated.admin_comments:
            body += f"\nAdmin comments: {updated.admin_comments}"
        await notify_safely(
            notifier, updated.coordinator.email, f"Suggestion {updated.status.capitalize()}", body
        )
    return _to_response(updated)


async def approve_suggestion(
    db: AsyncSession,
    notifier: Notifier,
    suggestion_id: int,
    reviewer: CurrentUser,
    admin_comments: Optional[str] = None,
) -> SuggestionResponse:
    return await _review_suggestion(db, notifier, suggestion_id, reviewer, RequestStatus.APPROVED, admin_comments)


async def reject_suggestion(
    db: AsyncSession,
    notifier: Notifier,
    suggestion_id: int,
    reviewer: CurrentUser,
    admin_comments: Optional[str] = None,
) -> SuggestionResponse:
    return await _review_suggestion(db, notifier, suggestion_id, reviewer, RequestStatus.REJECTED, admin_comments)


async def list_all_suggestions(db: AsyncSession) -> List[SuggestionResponse]:
    rows = await SuggestionRepository(db).find_all()
    return [_to_response(s) for s in rows]


async def get_own_suggestions(
    db: AsyncSession,
    coordinator_id: str,
    current_user: CurrentUser,
) -> List[SuggestionResponse]:
    coordinator_id = coordinator_id.strip()
    ensure_self_or_admin(
        current_user,
        coordinator_id,
        "You do not have permission to view other coordinators' suggestions",
    )
    rows = await SuggestionRepository(db).find_by_coordinator(coordinator_id)
    return [_to_response(s) for s in rows]


async def get_suggestion(db: AsyncSession, suggestion_id: int) -> SuggestionResponse:
    suggestion = await SuggestionRepository(db).find_by_id(suggestion_id)
    if not suggestion:
        raise NotFoundError("Suggestion", suggestion_id)
    return _to_response(suggestion)
