"""Team Membership model."""

import enum
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base

MEMBERSHIP_UNIQUE_CONSTRAINT = "uq_team_memberships_team_member"


class PresenceStatus(str, enum.Enum):
    ONLINE = "online"
    OFFLINE = "offline"


class TeamMembership(Base):
    __tablename__ = "team_memberships"
    __table_args__ = (
        # One row per (team, member); the join-request resolver relies on it
        UniqueConstraint("team_id", "member_name", name=MEMBERSHIP_UNIQUE_CONSTRAINT),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    team_id: Mapped[int] = mapped_column(ForeignKey("teams.id", ondelete="CASCADE"), nullable=False)
    member_name: Mapped[str] = mapped_column(String(100), nullable=False)

    role: Mapped[str] = mapped_column(String(50), nullable=False)
    rank: Mapped[str] = mapped_column(String(50), nullable=False)
    is_captain: Mapped[bool] = mapped_column(Boolean, default=False)

    presence_status: Mapped[PresenceStatus] = mapped_column(
        Enum(PresenceStatus), default=PresenceStatus.ONLINE
    )
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
