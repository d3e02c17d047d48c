from enum import Enum


class ComplaintStatus(str, Enum):
    """Status values of complaints handled by the REST routes."""
    submitted = "Submitted"
    in_review = "InReview"
    resolved = "Resolved"


class PortalComplaintStatus(str, Enum):
    """Status values of complaints handled by the named procedures."""
    pending = "pending"
    responded = "responded"


class DenyReason(str, Enum):
    not_authenticated = "NotAuthenticated"
    not_owner = "NotOwner"
    not_admin = "NotAdmin"
    not_official = "NotOfficial"
    invalid_status = "InvalidStatus"
    already_official = "AlreadyOfficial"


class TokenErrorKind(str, Enum):
    malformed = "Malformed"
    invalid_signature = "InvalidSignature"
    expired = "Expired"
