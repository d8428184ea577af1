"""Admin accounts configured through environment variables.

Accounts are never stored in the project or in the config file. Each one
is read from a ``ACADEMY_ADMIN_USERNAME_<n>`` / ``ACADEMY_ADMIN_PASSWORD_<n>``
pair (``n`` = 1, 2), plus an unnumbered ``ACADEMY_ADMIN_USERNAME`` /
``ACADEMY_ADMIN_PASSWORD`` pair for single-admin installations. A pair with
a missing half is ignored.
"""

from __future__ import annotations

import hmac
import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field

ENV_USERNAME = "ACADEMY_ADMIN_USERNAME"
ENV_PASSWORD = "ACADEMY_ADMIN_PASSWORD"
_NUMBERED_SLOTS = (1, 2)


class AdminAccount(BaseModel):
    """A username/password pair allowed to use the admin commands."""

    username: str = Field(min_length=1)
    password: str = Field(min_length=1, repr=False)


def load_admin_accounts(environ: Optional[Mapping[str, str]] = None) -> list[AdminAccount]:
    """Read the configured admin accounts.

    Args:
        environ: Mapping to read from. Defaults to :data:`os.environ`.

    Returns:
        Accounts in slot order (numbered slots first, then the unnumbered
        fallback). Duplicate usernames keep their first occurrence.
    """
    env = os.environ if environ is None else environ
    pairs = [(f"{ENV_USERNAME}_{n}", f"{ENV_PASSWORD}_{n}") for n in _NUMBERED_SLOTS]
    pairs.append((ENV_USERNAME, ENV_PASSWORD))

    accounts: list[AdminAccount] = []
    seen: set[str] = set()
    for user_var, pass_var in pairs:
        username = env.get(user_var, "").strip()
        password = env.get(pass_var, "")
        if not username or not password or username in seen:
            continue
        seen.add(username)
        accounts.append(AdminAccount(username=username, password=password))
    return accounts


def verify_credentials(
    username: str, password: str, accounts: list[AdminAccount]
) -> Optional[AdminAccount]:
    """Return the account matching *username* and *password*, or ``None``.

    Every account is compared with :func:`hmac.compare_digest` so the time
    taken does not depend on which account (if any) matched.
    """
    match: Optional[AdminAccount] = None
    for account in accounts:
        user_ok = hmac.compare_digest(account.username.encode(), username.encode())
        pass_ok = hmac.compare_digest(account.password.encode(), password.encode())
        if user_ok and pass_ok and match is None:
            match = account
    return match
