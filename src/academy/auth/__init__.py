"""Admin authentication.

Credentials come from environment variables
(:mod:`~academy.auth.accounts`); a successful login is remembered in a
session file (:mod:`~academy.auth.session_store`) for 24 hours.
:mod:`~academy.auth.manager` ties the two together and clears the response
cache whenever the admin identity changes.
"""

from academy.auth.accounts import AdminAccount, load_admin_accounts, verify_credentials
from academy.auth.manager import current_session, login, logout, require_admin
from academy.auth.session_store import AdminSession, SessionStore

__all__ = [
    "AdminAccount",
    "AdminSession",
    "SessionStore",
    "current_session",
    "load_admin_accounts",
    "login",
    "logout",
    "require_admin",
    "verify_credentials",
]
