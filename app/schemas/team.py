"""Team and join-request Pydantic schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from app.models.request import RequestStatus
from app.models.team_membership import PresenceStatus


class TeamOut(BaseModel):
    id: int
    name: str
    tag: Optional[str] = None
    description: Optional[str] = None
    owner_id: int
    total_members: int = 0

    model_config = {"from_attributes": True}


class TeamStats(BaseModel):
    team_id: int
    name: str
    total_members: int
    pending_requests: int


class MembershipOut(BaseModel):
    id: int
    team_id: int
    member_name: str
    role: str
    rank: str
    is_captain: bool
    presence_status: PresenceStatus
    joined_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TeamMembers(BaseModel):
    team_info: TeamOut
    members: List[MembershipOut]
    total_members: int


class JoinRequestCreate(BaseModel):
    """Body of ``POST /teams/join-request``; presence is checked by the route."""
    team_id: Optional[int] = None
    user_id: Optional[int] = None
    role: Optional[str] = None
    rank: Optional[str] = None


class JoinRequestDecision(BaseModel):
    """Body of ``POST /teams/requests``; ``action`` is ``accepted`` or ``rejected``."""
    request_id: Optional[int] = None
    action: Optional[str] = None


class JoinRequestOut(BaseModel):
    id: int
    team_id: int
    requester_name: str
    role: str
    rank: str
    experience: Optional[str] = None
    avatar_url: Optional[str] = None
    status: RequestStatus
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ResolutionOut(BaseModel):
    request_id: int
    team_id: int
    member_name: str
    status: RequestStatus

    model_config = {"from_attributes": True}
