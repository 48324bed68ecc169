# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication and authorization.
#
# Supports both:
# - ES256 (new Supabase JWT signing keys) via JWKS
# - HS256 (legacy Supabase JWT secret) as fallback
#
# Failures raise AuthenticationRequiredError (401) so the client receives
# the same {success, error: "AUTHENTICATION_REQUIRED"} payload as a credit
# refusal and can open its login modal.
#
# Usage:
#   from app.auth import get_current_user, require_admin, AuthUser
#
#   @router.get("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
#
#   @router.post("/admin-only", dependencies=[Depends(require_admin)])
#   async def admin_only(): ...
# =============================================================================

import logging
import time
from typing import Optional
from uuid import UUID
import httpx

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError

from app.config import settings
from app.auth.models import AuthUser
from app.exceptions import AuthenticationRequiredError, PermissionDeniedError
from core.services.role_service import RoleService

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor (missing header handled below, not by FastAPI)
security = HTTPBearer(auto_error=False)

# Cache for JWKS keys
_jwks_cache: dict = {}
_jwks_cache_time: float = 0
JWKS_CACHE_TTL = 3600  # 1 hour


def _get_jwks_url() -> str:
    """Get the JWKS URL from Supabase URL."""
    # Format: https://<project-ref>.supabase.co
    supabase_url = settings.SUPABASE_URL.rstrip('/')
    return f"{supabase_url}/auth/v1/.well-known/jwks.json"


def _fetch_jwks() -> dict:
    """Fetch JWKS from Supabase with caching."""
    global _jwks_cache, _jwks_cache_time

    current_time = time.time()

    # Return cached if valid
    if _jwks_cache and (current_time - _jwks_cache_time) < JWKS_CACHE_TTL:
        return _jwks_cache

    try:
        jwks_url = _get_jwks_url()
        response = httpx.get(jwks_url, timeout=10)
        response.raise_for_status()
        _jwks_cache = response.json()
        _jwks_cache_time = current_time
        logger.debug(f"Fetched JWKS from {jwks_url}")
        return _jwks_cache
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"Failed to fetch JWKS: {e}")
        # Return cached even if expired, as fallback
        if _jwks_cache:
            return _jwks_cache
        return {"keys": []}


def _get_signing_key(token: str) -> tuple[str | dict, str]:
    """
    Get the appropriate signing key for a token.

    Returns:
        Tuple of (key, algorithm) to use for verification
    """
    # Decode header without verification to get algorithm and key ID
    try:
        unverified_header = jwt.get_unverified_header(token)
    except JWTError:
        # Fall back to HS256 if we can't read the header
        return settings.SUPABASE_JWT_SECRET, "HS256"

    alg = unverified_header.get("alg", "HS256")
    kid = unverified_header.get("kid")

    # If HS256, use the legacy secret
    if alg == "HS256":
        return settings.SUPABASE_JWT_SECRET, "HS256"

    # For ES256 or other algorithms, use JWKS
    if kid:
        jwks = _fetch_jwks()
        for key in jwks.get("keys", []):
            if key.get("kid") == kid:
                return key, alg

    # Fallback to HS256
    logger.warning(f"Could not find key for alg={alg}, kid={kid}, falling back to HS256")
    return settings.SUPABASE_JWT_SECRET, "HS256"


def decode_token(token: str) -> AuthUser:
    """
    Verify a Supabase JWT and return the user it identifies.

    Raises:
        AuthenticationRequiredError: If the token is invalid or expired
    """
    try:
        signing_key, algorithm = _get_signing_key(token)

        payload = jwt.decode(
            token,
            signing_key,
            algorithms=[algorithm],
            audience="authenticated"
        )

    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise AuthenticationRequiredError("Session expirée, veuillez vous reconnecter")

    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise AuthenticationRequiredError("Jeton d'authentification invalide")

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("JWT token missing 'sub' claim")
        raise AuthenticationRequiredError("Jeton d'authentification invalide")

    try:
        user_uuid = UUID(user_id)
    except ValueError:
        logger.warning(f"Invalid UUID in token: {user_id}")
        raise AuthenticationRequiredError("Jeton d'authentification invalide")

    logger.debug(f"Authenticated user: {user_id}")
    return AuthUser(id=user_uuid, email=payload.get("email"))


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> AuthUser:
    """
    Extract and validate user from Supabase JWT token.

    This dependency:
    1. Extracts the Bearer token from the Authorization header
    2. Verifies the JWT signature (supports ES256 and HS256)
    3. Validates the token hasn't expired
    4. Returns an AuthUser with the user's ID and email

    Raises:
        AuthenticationRequiredError: 401 if token is missing, invalid or expired
    """
    if credentials is None:
        raise AuthenticationRequiredError()
    return decode_token(credentials.credentials)


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[AuthUser]:
    """
    Optionally get the current user from JWT token.

    Returns None if no token is provided or the token is invalid,
    instead of raising an error.
    """
    if credentials is None:
        return None

    try:
        return decode_token(credentials.credentials)
    except AuthenticationRequiredError:
        # If token is invalid, treat as no auth rather than error
        return None


# =============================================================================
# Authorization
# =============================================================================

async def require_admin(user: AuthUser = Depends(get_current_user)) -> AuthUser:
    """
    Allow admins and super admins only.

    Raises:
        PermissionDeniedError: 403 for other users
    """
    if not RoleService.is_admin(user.id):
        logger.warning(f"User {user.id} denied admin access")
        raise PermissionDeniedError("admin")
    return user


def require_permission(permission: str):
    """
    Build a dependency allowing users whose roles grant `permission`
    (admins always pass).

    Usage:
        @router.post("/templates")
        async def add(user: AuthUser = Depends(require_permission("templates.manage"))): ...
    """
    async def dependency(user: AuthUser = Depends(get_current_user)) -> AuthUser:
        if not RoleService.has_permission(user.id, permission):
            logger.warning(f"User {user.id} lacks permission {permission}")
            raise PermissionDeniedError(permission)
        return user

    return dependency
