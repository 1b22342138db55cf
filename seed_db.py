import asyncio

from app.database import Base, async_session, engine
from app.models.request import JoinRequest, RequestStatus
from app.models.team import Team
from app.models.team_membership import TeamMembership
from app.models.user import User


async def async_main():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        # Create players
        u1 = User(username="shadowfox", email="shadowfox@example.com", bio="IGL, five seasons of ranked play.")
        u2 = User(username="alice", email="alice@example.com", bio="Support main.")
        u3 = User(username="kirin", email="kirin@example.com", bio="Entry fragger.")
        u4 = User(username="mole", email="mole@example.com")
        session.add_all([u1, u2, u3, u4])
        await session.flush()

        # Create team with its owner as captain
        t = Team(name="Night Owls", tag="NOWL", description="Weekend scrims, EU servers", owner_id=u1.id, total_members=1)
        session.add(t)
        await session.flush()

        session.add(TeamMembership(team_id=t.id, member_name=u1.username, role="IGL", rank="Diamond", is_captain=True))

        # Pending applications waiting for the owner
        session.add_all([
            JoinRequest(team_id=t.id, requester_name=u2.username, role="support", rank="gold", experience=u2.bio, status=RequestStatus.PENDING),
            JoinRequest(team_id=t.id, requester_name=u3.username, role="entry", rank="platinum", experience=u3.bio, status=RequestStatus.PENDING),
            JoinRequest(team_id=t.id, requester_name=u4.username, role="Mid", rank="Unranked", experience="No experience listed", status=RequestStatus.REJECTED),
        ])

        await session.commit()
        print(f"Seeded team {t.name!r} (id={t.id}) with 2 pending join requests.")

if __name__ == "__main__":
    asyncio.run(async_main())
