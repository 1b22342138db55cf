"""
Arena Teams – error taxonomy for the team request endpoints.

Every failure carries a stable machine-readable ``kind`` and the HTTP status
it maps to. The FastAPI handler in ``app.main`` is the only place these are
turned into responses.
"""

from typing import Optional


class JoinRequestError(Exception):
    """Base class for failures reported through the response envelope."""

    kind = "error"
    status_code = 500
    default_message = "Request could not be processed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(JoinRequestError):
    kind = "invalid_input"
    status_code = 400
    default_message = "Missing required fields"


class AlreadyProcessed(JoinRequestError):
    kind = "already_processed"
    status_code = 400
    default_message = "Request not found or already processed"


# Reported as server errors rather than 409, matching the existing clients.
class DuplicateMember(JoinRequestError):
    kind = "duplicate_member"
    status_code = 500
    default_message = "User is already a team member"


class WriteFailure(JoinRequestError):
    kind = "write_failure"
    status_code = 500
    default_message = "Failed to update request status"


class TeamNotFound(JoinRequestError):
    kind = "team_not_found"
    status_code = 404
    default_message = "Team not found"


class UserNotFound(JoinRequestError):
    kind = "user_not_found"
    status_code = 404
    default_message = "User not found"


class MemberNotFound(JoinRequestError):
    kind = "member_not_found"
    status_code = 404
    default_message = "Member not found"
