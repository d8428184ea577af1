"""Admin login, logout, and session checks.

Logging in or out changes what the API is allowed to show (draft blog
posts, enquiries), so both operations empty the response cache. Nothing
cached under one identity survives into the next.
"""

from __future__ import annotations

import logging
from typing import Optional

from academy.auth.accounts import AdminAccount, load_admin_accounts, verify_credentials
from academy.auth.session_store import AdminSession, SessionStore
from academy.cache import ResponseCache
from academy.exceptions import AuthError

logger = logging.getLogger(__name__)


def login(
    username: str,
    password: str,
    cache: ResponseCache,
    accounts: Optional[list[AdminAccount]] = None,
    store: Optional[SessionStore] = None,
) -> AdminSession:
    """Check credentials and start a 24-hour admin session.

    Args:
        username: Admin username.
        password: Admin password.
        cache: Response cache to clear on success.
        accounts: Accounts to check against. Defaults to
            :func:`~academy.auth.accounts.load_admin_accounts`.
        store: Where to persist the session.

    Returns:
        The new session.

    Raises:
        AuthError: If no accounts are configured or the credentials do not
            match. The cache and any existing session are left untouched.
    """
    accounts = load_admin_accounts() if accounts is None else accounts
    if not accounts:
        raise AuthError(
            "No admin accounts configured. Set ACADEMY_ADMIN_USERNAME and "
            "ACADEMY_ADMIN_PASSWORD (or the _1/_2 variants)."
        )
    account = verify_credentials(username, password, accounts)
    if account is None:
        logger.warning("Rejected admin login for %r", username)
        raise AuthError("Invalid username or password")

    session = AdminSession.start(account.username)
    (store or SessionStore()).save(session)
    cache.invalidate_all()
    logger.info("Admin %s logged in until %s", session.username, session.expires_at)
    return session


def logout(cache: ResponseCache, store: Optional[SessionStore] = None) -> None:
    """End the admin session (if any) and clear the response cache."""
    (store or SessionStore()).clear()
    cache.invalidate_all()
    logger.info("Admin session cleared")


def current_session(store: Optional[SessionStore] = None) -> Optional[AdminSession]:
    """Return the active admin session, or ``None``.

    An expired session is removed from disk as a side effect.
    """
    store = store or SessionStore()
    session = store.load()
    if session is None:
        return None
    if not session.is_active():
        logger.info("Admin session for %s expired", session.username)
        store.clear()
        return None
    return session


def require_admin(store: Optional[SessionStore] = None) -> AdminSession:
    """Return the active admin session.

    Raises:
        AuthError: If nobody is logged in or the session has expired.
    """
    session = current_session(store)
    if session is None:
        raise AuthError("Admin login required. Run 'academy admin login' first.")
    return session
