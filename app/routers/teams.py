"""Teams router – membership lookups, join requests, and team dissolution."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import case, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.errors import InvalidInput, MemberNotFound, TeamNotFound, WriteFailure
from app.models.request import JoinRequest, RequestStatus
from app.models.team import Team
from app.models.team_membership import TeamMembership
from app.models.user import User
from app.schemas.common import ApiResponse
from app.schemas.team import (
    JoinRequestCreate,
    JoinRequestDecision,
    JoinRequestOut,
    MembershipOut,
    ResolutionOut,
    TeamMembers,
    TeamOut,
    TeamStats,
)
from app.services.join_requests import (
    Decision,
    list_pending_requests,
    recount_members,
    resolve_join_request,
    submit_join_request,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/teams", tags=["teams"])


async def _get_team(db: AsyncSession, team_id: int) -> Team:
    result = await db.execute(select(Team).where(Team.id == team_id))
    team = result.scalar_one_or_none()
    if not team:
        raise TeamNotFound()
    return team


# ═══════════════════════════════════════════════════════════════
#  Join requests
# ═══════════════════════════════════════════════════════════════

@router.post("/join-request", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def request_to_join(
    body: JoinRequestCreate,
    db: AsyncSession = Depends(get_db),
):
    """Player applies to join a team."""
    if body.team_id is None or body.user_id is None:
        raise InvalidInput()

    join_request = await submit_join_request(
        db, body.team_id, body.user_id, role=body.role, rank=body.rank
    )
    return ApiResponse(
        success=True,
        data=JoinRequestOut.model_validate(join_request).model_dump(mode="json"),
        message="Join request sent successfully",
    )


@router.get("/{team_id}/requests", response_model=ApiResponse)
async def pending_requests(team_id: int, db: AsyncSession = Depends(get_db)):
    """Pending join requests for a team, newest first."""
    requests = await list_pending_requests(db, team_id)
    return ApiResponse(
        success=True,
        data=[JoinRequestOut.model_validate(r).model_dump(mode="json") for r in requests],
    )


@router.post("/requests", response_model=ApiResponse)
async def resolve_request(
    body: JoinRequestDecision,
    db: AsyncSession = Depends(get_db),
):
    """Team owner accepts or rejects a pending join request."""
    logger.info(f"Processing team request with data: {body.model_dump()}")
    if body.request_id is None or not body.action:
        raise InvalidInput()

    decision = Decision.from_action(body.action)
    resolution = await resolve_join_request(db, body.request_id, decision)
    return ApiResponse(
        success=True,
        data=ResolutionOut.model_validate(resolution).model_dump(mode="json"),
        message=f"Request {resolution.status.value} successfully",
    )


# ═══════════════════════════════════════════════════════════════
#  Team lookups
# ═══════════════════════════════════════════════════════════════

@router.get("/{team_id}/members", response_model=ApiResponse)
async def team_members(team_id: int, db: AsyncSession = Depends(get_db)):
    """Team info plus its members: owner, then captains, then most recent joiners."""
    team = await _get_team(db, team_id)

    owner_name = (
        await db.execute(select(User.username).where(User.id == team.owner_id))
    ).scalar_one_or_none()

    result = await db.execute(
        select(TeamMembership)
        .where(TeamMembership.team_id == team_id)
        .order_by(
            case((TeamMembership.member_name == owner_name, 0), else_=1),
            TeamMembership.is_captain.desc(),
            TeamMembership.joined_at.desc(),
            TeamMembership.id.desc(),
        )
    )
    members = result.scalars().all()

    payload = TeamMembers(
        team_info=TeamOut.model_validate(team),
        members=[MembershipOut.model_validate(m) for m in members],
        total_members=len(members),
    )
    return ApiResponse(success=True, data=payload.model_dump(mode="json"))


@router.delete("/{team_id}/members/{member_id}", response_model=ApiResponse)
async def remove_member(team_id: int, member_id: int, db: AsyncSession = Depends(get_db)):
    """Drop a player from the roster and recount the team."""
    try:
        result = await db.execute(
            TeamMembership.__table__.delete().where(
                TeamMembership.id == member_id,
                TeamMembership.team_id == team_id,
            )
        )
        if result.rowcount == 0:
            raise MemberNotFound()
        await recount_members(db, team_id)
        await db.commit()
    except MemberNotFound:
        await db.rollback()
        raise
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error(f"Error removing member {member_id} from team {team_id}: {exc}")
        raise WriteFailure("Failed to remove member") from exc

    logger.info(f"Member {member_id} removed from team {team_id}")
    return ApiResponse(success=True, message="Member removed successfully")


@router.get("/{team_id}/stats", response_model=ApiResponse)
async def team_stats(team_id: int, db: AsyncSession = Depends(get_db)):
    team = await _get_team(db, team_id)

    member_count = (
        await db.execute(
            select(func.count(TeamMembership.id)).where(TeamMembership.team_id == team_id)
        )
    ).scalar() or 0
    pending_count = (
        await db.execute(
            select(func.count(JoinRequest.id)).where(
                JoinRequest.team_id == team_id,
                JoinRequest.status == RequestStatus.PENDING,
            )
        )
    ).scalar() or 0

    stats = TeamStats(
        team_id=team.id,
        name=team.name,
        total_members=member_count,
        pending_requests=pending_count,
    )
    return ApiResponse(success=True, data=stats.model_dump())


@router.delete("/{team_id}", response_model=ApiResponse)
async def delete_team(team_id: int, db: AsyncSession = Depends(get_db)):
    """Dissolve a team together with its memberships and join requests."""
    try:
        await db.execute(TeamMembership.__table__.delete().where(TeamMembership.team_id == team_id))
        await db.execute(JoinRequest.__table__.delete().where(JoinRequest.team_id == team_id))
        result = await db.execute(Team.__table__.delete().where(Team.id == team_id))
        if result.rowcount == 0:
            raise TeamNotFound()
        await db.commit()
    except TeamNotFound:
        await db.rollback()
        raise
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error(f"Error deleting team {team_id}: {exc}")
        raise WriteFailure("Failed to delete team") from exc

    logger.info(f"Team {team_id} dissolved")
    return ApiResponse(success=True, message="Team deleted successfully")
