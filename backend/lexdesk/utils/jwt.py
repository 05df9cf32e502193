"""JWT Token Validation for bearer tokens issued by the auth service"""
import jwt
from typing import Any, Dict, Optional
from pydantic import ValidationError as SchemaValidationError

from ..config.settings import settings
from ..domain.errors import AuthenticationError
from ..domain.models import ActorContext
from ..domain.enums import UserRole
from .logger import get_logger

logger = get_logger(__name__)


class JWTValidator:
    """Shared-secret (HS256 by default) JWT validator"""

    def __init__(
        self,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
        audience: Optional[str] = None
    ):
        self.secret = secret or settings.jwt_secret
        self.algorithm = algorithm or settings.jwt_algorithm
        self.audience = audience if audience is not None else settings.jwt_audience

    def validate_token(self, token: str) -> Dict[str, Any]:
        """
        Verify signature and expiry of a bearer token

        Args:
            token: Bearer token (with or without 'Bearer ' prefix)

        Returns:
            Decoded token claims

        Raises:
            AuthenticationError: If token is invalid
        """
        if not token:
            raise AuthenticationError("Token is missing")

        if token.startswith("Bearer "):
            token = token[7:]

        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                options={
                    "verify_exp": True,
                    "verify_aud": self.audience is not None,
                }
            )
        except jwt.ExpiredSignatureError:
            logger.warning("Token expired")
            raise AuthenticationError("Token has expired")
        except jwt.InvalidAudienceError as e:
            logger.warning(f"Invalid token audience: {e}")
            raise AuthenticationError("Invalid token audience")
        except jwt.PyJWTError as e:
            logger.warning(f"JWT validation error: {e}")
            raise AuthenticationError(f"Invalid token: {str(e)}")

    def get_actor_context(self, token: str) -> ActorContext:
        """
        Map validated claims to the acting user

        The id claim is `id`, falling back to `sub`; `role` must be one of
        client, advocate, paralegal or admin.
        """
        claims = self.validate_token(token)

        user_id = claims.get("id") or claims.get("sub")
        if not user_id:
            raise AuthenticationError("Token does not identify a user")

        try:
            role = UserRole(claims.get("role"))
        except ValueError:
            logger.warning(f"Unknown role in token: {claims.get('role')}")
            raise AuthenticationError("Token carries an unknown role")

        email = claims.get("email", "")
        try:
            return ActorContext(
                user_id=str(user_id),
                email=email,
                name=claims.get("name") or email,
                role=role
            )
        except SchemaValidationError:
            raise AuthenticationError("Token claims are incomplete")


# Global validator instance
_jwt_validator: Optional[JWTValidator] = None


def get_jwt_validator() -> JWTValidator:
    """Get global JWT validator instance"""
    global _jwt_validator
    if _jwt_validator is None:
        _jwt_validator = JWTValidator()
    return _jwt_validator


def get_current_user(authorization: str) -> ActorContext:
    """
    Get current user from authorization header

    Args:
        authorization: Authorization header value

    Returns:
        ActorContext
    """
    if not authorization:
        raise AuthenticationError("Authorization header is missing")

    return get_jwt_validator().get_actor_context(authorization)
