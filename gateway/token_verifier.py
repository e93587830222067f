import logging
from typing import Optional

import jwt

from .errors import GatewayError

logger = logging.getLogger(__name__)


class TokenVerifier:
    """Decodes signed access tokens into the user id they were issued for."""

    def __init__(self, secret: str, algorithm: str = 'HS256'):
        self.secret = secret
        self.algorithm = algorithm

    def decode(self, token: Optional[str]) -> str:
        if not token:
            raise GatewayError.identity("No token provided")

        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as e:
            logger.info("Rejected expired access token")
            raise GatewayError.identity("Unauthorised") from e
        except jwt.InvalidTokenError as e:
            logger.info(f"Rejected access token: {e}")
            raise GatewayError.identity("Unauthorised") from e

        user_id = payload.get('id')
        if not user_id:
            raise GatewayError.identity("Unauthorised")
        return str(user_id)
