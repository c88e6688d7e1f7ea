from fastapi import Request, Depends
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from jose import JWTError

from .auth import decode_access_token
from .errors import AuthenticationError
from app.db.session import get_db_session

logger = logging.getLogger(__name__)

# List of paths that should be excluded from authentication checks
PUBLIC_PATHS = [
    "/health",
    "/docs",
    "/openapi.json",
    "/redoc"
]

async def verify_token_middleware(request: Request, call_next):
    """
    Middleware to check the bearer token and add the authenticated user to request state.
    This doesn't block unauthenticated requests, but just adds user info if authenticated.
    """
    request.state.user = None

    # Skip authentication for public paths
    if any(request.url.path.startswith(public_path) for public_path in PUBLIC_PATHS):
        return await call_next(request)

    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        token = auth_header[len("Bearer "):].strip()
        if token:
            try:
                claims = decode_access_token(token)
                request.state.user = {
                    "user_id": claims.account_id,
                    "email": claims.email,
                }
            except JWTError as e:
                # Continue without user info if token is invalid
                logger.info(f"Rejected bearer token: {e}")

    response = await call_next(request)
    return response

# FastAPI dependency for protected routes
def get_current_user(request: Request):
    """
    Dependency to use in FastAPI route functions that require authentication.
    This will raise a 401 if the user is not authenticated.
    """
    user = getattr(request.state, "user", None)
    if not user:
        raise AuthenticationError()
    return user

# Get a database session dependency
async def get_db(request: Request):
    """Yield an async SQLAlchemy session (dependency)."""
    async for session in get_db_session(request):
        yield session
