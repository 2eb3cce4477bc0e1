"""
Token Service

Verifies bearer tokens issued by the account service and extracts the
user identity. Tokens are never issued here.
"""

import jwt
from typing import Any, Dict


class TokenService:
    """
    JWT verification for protected endpoints.
    """

    def __init__(self, jwt_secret: str, algorithm: str = "HS256"):
        """
        Initialize the token service.

        Args:
            jwt_secret: Secret key shared with the token issuer
            algorithm: Signing algorithm the issuer uses
        """
        if not jwt_secret:
            raise ValueError("JWT secret is required")
        self.jwt_secret = jwt_secret
        self.algorithm = algorithm

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode a JWT token.

        Args:
            token: JWT token string

        Returns:
            Dictionary with success status and the identity or an error
        """
        if not token:
            return {"success": False, "error": "Token is required"}

        try:
            payload = jwt.decode(token, self.jwt_secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            return {"success": False, "error": "Token has expired"}
        except jwt.InvalidTokenError:
            return {"success": False, "error": "Invalid token"}

        identity = payload.get("email")
        if not isinstance(identity, str) or not identity:
            return {"success": False, "error": "Invalid token payload"}

        return {"success": True, "identity": identity}
