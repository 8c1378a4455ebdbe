from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Depends, HTTPException, Request, status
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError, JWTError

# Roles allowed to delete financial records, batches, flocks and weight records.
MANAGER_ROLES = ("Farm Manager", "Manager")


@dataclass(frozen=True)
class AuthenticatedContext:
    user_id: str
    role: str
    email: Optional[str] = None

    @property
    def identifier(self) -> str:
        return self.email or self.user_id


def decode_session_token(token: str, secret: str, algorithm: str) -> dict:
    """
    Verify a session token issued by the identity provider and return its claims.

    Raises HTTPException(401) for anything that does not verify.
    """
    try:
        return jwt.decode(token, secret, algorithms=[algorithm])
    except ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired"
        )
    except JWTClaimsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token claims: {e}"
        )
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Token validation failed: {e}"
        )


def get_current_user(request: Request) -> AuthenticatedContext:
    """
    FastAPI dependency to validate the session JWT from the Authorization header.

    Usage:
        @router.get("/secure-data", dependencies=[Depends(get_current_user)])
        def secure_endpoint():
            return {"message": "This is secure data."}
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )

    # The token is expected to be in the format "Bearer <token>"
    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
        )

    settings = request.app.state.settings
    payload = decode_session_token(parts[1], settings.session_secret, settings.session_algorithm)

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token is missing a subject"
        )
    return AuthenticatedContext(
        user_id=str(user_id),
        role=payload.get("role") or "User",
        email=payload.get("email"),
    )


def require_role(*roles: str) -> Callable[..., AuthenticatedContext]:
    """Dependency factory that only lets the given roles through."""

    def checker(user: AuthenticatedContext = Depends(get_current_user)) -> AuthenticatedContext:
        if user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Only {' or '.join(roles)} users can perform this action"
            )
        return user

    return checker


def get_user_identifier(user: AuthenticatedContext) -> str:
    return user.identifier
