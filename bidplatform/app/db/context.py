"""Request context carrying the authenticated user."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class RequestContext:
    """Identity of the user making the request.

    Produced by the auth dependency and consumed by role checks and the
    RFQ pipeline (creator reference, notification text).
    """

    user_id: UUID
    name: str
    role: str
