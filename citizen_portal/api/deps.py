# citizen_portal/api/deps.py
"""
Access guard.

``get_current_identity`` rejects requests without a valid bearer token;
``get_optional_identity`` lets anonymous callers through as ``None`` but
still rejects a token that is present and invalid.
"""
import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from citizen_portal.core.authz import Identity
from citizen_portal.core.config import Settings
from citizen_portal.core.errors import AuthenticationError
from citizen_portal.core.security import TokenError, TokenIssuer
from citizen_portal.db.mongo import AUDIT_LOGS, get_db
from citizen_portal.repositories.audit_repository import AuditRepository
from citizen_portal.services.audit_service import AuditService
from citizen_portal.services.identity_service import resolve_identity

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_audit_service(db=Depends(get_db)) -> AuditService:
    return AuditService(AuditRepository(db[AUDIT_LOGS]))


async def _identity_from(credentials: HTTPAuthorizationCredentials, db, issuer: TokenIssuer) -> Identity:
    try:
        claims = issuer.validate(credentials.credentials)
    except TokenError as e:
        logger.info("Rejected token (%s): %s", e.kind.value, e.message)
        raise AuthenticationError("Unauthorized - Invalid token", code=e.kind.value)
    return await resolve_identity(db, claims)


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db=Depends(get_db),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> Identity:
    if credentials is None:
        raise AuthenticationError("Unauthorized - No token provided")
    return await _identity_from(credentials, db, issuer)


async def get_optional_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db=Depends(get_db),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> Optional[Identity]:
    if credentials is None:
        return None
    return await _identity_from(credentials, db, issuer)
