"""
Arena Teams – SQLAlchemy ORM models package.

Imports all model classes so the app can discover them
through a single ``from app.models import *`` import.
"""

from app.models.user import User                   # noqa: F401
from app.models.team import Team                   # noqa: F401
from app.models.team_membership import TeamMembership # noqa: F401
from app.models.request import JoinRequest         # noqa: F401
