"""
Login against the configured demo accounts.
"""

from __future__ import annotations

import logging

from ..config import AppConfig
from ..domain.exceptions import AuthenticationError, AuthorizationError
from ..domain.models import User, UserRole
from .state import ClinicState

logger = logging.getLogger(__name__)


def require_role(user: User, role: UserRole) -> None:
    """Raise AuthorizationError unless ``user`` has ``role``."""
    if user.role != role:
        raise AuthorizationError(
            f"This action requires the {role.value} role; {user.username} is a {user.role.value}."
        )


class AuthService:
    """
    Checks credentials and keeps the logged-in user in the clinic state.
    """

    INVALID_CREDENTIALS = "Invalid credentials. Try 'demo' for both fields."

    def __init__(self, state: ClinicState, config: AppConfig) -> None:
        self._state = state
        self._config = config

    def login(self, username: str, password: str, role: UserRole) -> User:
        """
        Log in as one of the configured accounts.

        Username, password and the selected role must all match.

        Raises:
            AuthenticationError: If the credentials are wrong
        """
        account = self._config.find_account(username)

        if account is None or account.password != password or account.role != UserRole(role):
            logger.info("Failed login attempt for %r as %s", username, UserRole(role).value)
            raise AuthenticationError(self.INVALID_CREDENTIALS)

        user = account.to_user()
        self._state.set_current_user(user)

        logger.info("Logged in as %s (%s)", user.display_name, user.role.value)
        return user

    def logout(self) -> None:
        user = self._state.current_user
        self._state.set_current_user(None)
        if user is not None:
            logger.info("Logged out %s", user.username)

    def current_user(self) -> User:
        """
        Return the logged-in user.

        Raises:
            AuthenticationError: If nobody is logged in
        """
        user = self._state.current_user
        if user is None:
            raise AuthenticationError("Not logged in. Run 'clinicslots login' first.")
        return user
