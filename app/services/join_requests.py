"""
Team join-request workflow.

A join request moves ``pending -> accepted`` or ``pending -> rejected``
exactly once. Acceptance also enrolls the requester in ``team_memberships``;
both writes are committed together or rolled back together.
"""

import enum
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from app.config import settings
from app.errors import (
    AlreadyProcessed,
    DuplicateMember,
    InvalidInput,
    JoinRequestError,
    TeamNotFound,
    UserNotFound,
    WriteFailure,
)
from app.models.request import JoinRequest, RequestStatus
from app.models.team import Team
from app.models.team_membership import (
    MEMBERSHIP_UNIQUE_CONSTRAINT,
    PresenceStatus,
    TeamMembership,
)
from app.models.user import User

logger = logging.getLogger(__name__)


class Decision(str, enum.Enum):
    ACCEPT = "accept"
    REJECT = "reject"

    @classmethod
    def from_action(cls, action: str) -> "Decision":
        """Map the wire value (``accepted`` / ``rejected``) to a decision."""
        try:
            return _ACTIONS[action]
        except KeyError:
            raise InvalidInput(f"Unknown action '{action}', expected 'accepted' or 'rejected'") from None


_ACTIONS = {
    "accepted": Decision.ACCEPT,
    "rejected": Decision.REJECT,
}

_TARGET_STATUS = {
    Decision.ACCEPT: RequestStatus.ACCEPTED,
    Decision.REJECT: RequestStatus.REJECTED,
}


@dataclass
class Resolution:
    """Outcome of a successful resolution."""
    request_id: int
    team_id: int
    member_name: str
    status: RequestStatus


_MEMBERSHIP_UNIQUE_MARKERS = (
    MEMBERSHIP_UNIQUE_CONSTRAINT,
    # SQLite names the columns instead of the constraint
    "team_memberships.team_id, team_memberships.member_name",
)


def _is_unique_violation(exc: IntegrityError) -> bool:
    """True only when ``exc`` comes from the (team_id, member_name) constraint."""
    text = str(exc.orig)
    return any(marker in text for marker in _MEMBERSHIP_UNIQUE_MARKERS)


async def recount_members(db: AsyncSession, team_id: int) -> None:
    """Recompute ``teams.total_members`` from the membership rows."""
    await db.execute(
        update(Team)
        .where(Team.id == team_id)
        .values(
            total_members=select(func.count(TeamMembership.id))
            .where(TeamMembership.team_id == team_id)
            .scalar_subquery()
        )
        .execution_options(synchronize_session=False)
    )


# ═══════════════════════════════════════════════════════════════
#  Resolve
# ═══════════════════════════════════════════════════════════════

async def _membership_exists(db: AsyncSession, team_id: int, member_name: str) -> bool:
    result = await db.execute(
        select(TeamMembership.id).where(
            TeamMembership.team_id == team_id,
            TeamMembership.member_name == member_name,
        )
    )
    return result.first() is not None


async def _enroll(db: AsyncSession, join_request: JoinRequest) -> None:
    """Insert the membership row for an accepted request."""
    if await _membership_exists(db, join_request.team_id, join_request.requester_name):
        raise DuplicateMember()

    db.add(
        TeamMembership(
            team_id=join_request.team_id,
            member_name=join_request.requester_name,
            role=join_request.role,
            rank=join_request.rank,
            presence_status=PresenceStatus.ONLINE,
        )
    )
    try:
        await db.flush()
    except IntegrityError as exc:
        # A concurrent resolver won the race past the check above
        if _is_unique_violation(exc):
            raise DuplicateMember() from exc
        raise WriteFailure("Failed to add member to team") from exc

    await recount_members(db, join_request.team_id)


async def resolve_join_request(
    db: AsyncSession,
    request_id: int,
    decision: Decision,
) -> Resolution:
    """
    Apply ``decision`` to a pending join request as one transaction.

    Raises ``AlreadyProcessed`` when the request does not exist or is no
    longer pending, ``DuplicateMember`` when acceptance would enroll the
    requester twice, and ``WriteFailure`` for any datastore failure.
    Nothing is written unless the whole resolution commits.
    """
    logger.info(f"Resolving join request {request_id}: decision={decision.value}")
    membership_key: Optional[Tuple[int, str]] = None

    try:
        result = await db.execute(
            select(JoinRequest)
            .where(
                JoinRequest.id == request_id,
                JoinRequest.status == RequestStatus.PENDING,
            )
            .with_for_update()
        )
        join_request = result.scalar_one_or_none()
        if not join_request:
            raise AlreadyProcessed()

        if decision is Decision.ACCEPT:
            membership_key = (join_request.team_id, join_request.requester_name)
            await _enroll(db, join_request)

        new_status = _TARGET_STATUS[decision]
        updated = await db.execute(
            update(JoinRequest)
            .where(
                JoinRequest.id == request_id,
                JoinRequest.status == RequestStatus.PENDING,
            )
            .values(status=new_status)
            .execution_options(synchronize_session=False)
        )
        if updated.rowcount != 1:
            raise WriteFailure()
        set_committed_value(join_request, "status", new_status)

        await db.commit()
    except JoinRequestError as exc:
        await db.rollback()
        if membership_key:
            logger.warning(
                f"Join request {request_id} ({decision.value}) failed [{exc.kind}]: "
                f"{exc.message}; membership key team_id={membership_key[0]} "
                f"member_name={membership_key[1]!r}"
            )
        else:
            logger.warning(
                f"Join request {request_id} ({decision.value}) failed [{exc.kind}]: {exc.message}"
            )
        raise
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error(
            f"Join request {request_id} ({decision.value}) failed [write_failure]: {exc}; "
            f"membership key={membership_key}"
        )
        raise WriteFailure() from exc

    logger.info(f"Join request {request_id} {new_status.value}")
    return Resolution(
        request_id=join_request.id,
        team_id=join_request.team_id,
        member_name=join_request.requester_name,
        status=new_status,
    )


# ═══════════════════════════════════════════════════════════════
#  Submit / list
# ═══════════════════════════════════════════════════════════════

async def submit_join_request(
    db: AsyncSession,
    team_id: int,
    user_id: int,
    role: Optional[str] = None,
    rank: Optional[str] = None,
) -> JoinRequest:
    """Create a pending join request for ``user_id`` on ``team_id``."""
    user = (await db.execute(select(User).where(User.id == user_id))).scalar_one_or_none()
    if not user:
        raise UserNotFound()

    team = (await db.execute(select(Team).where(Team.id == team_id))).scalar_one_or_none()
    if not team:
        raise TeamNotFound()

    pending = await db.execute(
        select(JoinRequest.id).where(
            JoinRequest.team_id == team_id,
            JoinRequest.requester_name == user.username,
            JoinRequest.status == RequestStatus.PENDING,
        )
    )
    if pending.first() is not None:
        raise InvalidInput("You already have a pending request for this team")

    if await _membership_exists(db, team_id, user.username):
        raise InvalidInput("You are already a member of this team")

    experience = (user.bio or "No experience listed")[: settings.EXPERIENCE_MAX_LENGTH]
    join_request = JoinRequest(
        team_id=team_id,
        requester_name=user.username,
        role=role or settings.DEFAULT_JOIN_ROLE,
        rank=rank or settings.DEFAULT_JOIN_RANK,
        experience=experience,
        avatar_url=user.avatar,
        status=RequestStatus.PENDING,
    )
    db.add(join_request)
    try:
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error(f"Failed to store join request for user {user_id} on team {team_id}: {exc}")
        raise WriteFailure("Failed to send join request") from exc

    await db.refresh(join_request)
    logger.info(f"User {user.username!r} requested to join team {team_id} (request {join_request.id})")
    return join_request


async def list_pending_requests(db: AsyncSession, team_id: int) -> List[JoinRequest]:
    """Pending requests for a team, newest first."""
    result = await db.execute(
        select(JoinRequest)
        .where(
            JoinRequest.team_id == team_id,
            JoinRequest.status == RequestStatus.PENDING,
        )
        .order_by(JoinRequest.created_at.desc(), JoinRequest.id.desc())
    )
    return list(result.scalars().all())
