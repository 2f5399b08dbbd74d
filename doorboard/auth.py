"""
Authentication session.

One AuthSession is created when a user session starts and handed to the
ApiClient and view models that need it. logout() / clear() end it.
"""
import logging
from typing import Optional

from .client import ApiClient, ApiError, AuthApi
from .schema import User

logger = logging.getLogger(__name__)


class AuthSession:
    """Holds the signed-in user and tokens for one dashboard session."""

    def __init__(self, auth_api: AuthApi):
        self.auth_api = auth_api
        self.user: Optional[User] = None
        self.access_token: Optional[str] = None
        self.refresh_token: Optional[str] = None

    @classmethod
    def start(cls, client: ApiClient) -> "AuthSession":
        """Create a session bound to client so its requests carry the token."""
        session = cls(AuthApi(client))
        client.session = session
        return session

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and bool(self.access_token)

    def login(self, email: str, password: str) -> User:
        """Sign in. Raises ApiError on bad credentials; state is untouched then."""
        payload = self.auth_api.login(email, password)
        token = payload.get("accessToken")
        if not token:
            raise ApiError("Login response did not include an access token", status=500)
        self.access_token = token
        self.refresh_token = payload.get("refreshToken")
        self.user = User.from_dict(payload.get("user") or {"email": email})
        logger.info(f"Signed in as {self.user.email}")
        return self.user

    def logout(self) -> None:
        """Tell the server, then drop local state even if the call failed."""
        if self.access_token:
            try:
                self.auth_api.logout()
            except ApiError as e:
                logger.warning(f"Logout request failed: {e.message}")
        self.clear()

    def clear(self) -> None:
        if self.user is not None:
            logger.info(f"Session cleared for {self.user.email}")
        self.user = None
        self.access_token = None
        self.refresh_token = None
