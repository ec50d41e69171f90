"""
Register a user through the same path as POST /utilisateurs.
Usage: CARDEX_PASSWORD=your-secure-password python scripts/create_user.py <username>
"""
import os
import secrets
import sys

from cardex.core.errors import DuplicatePrincipal
from cardex.db import QueryExecutor, engine
from cardex.services.authenticator import Authenticator


def create_user(username: str, password: str = None) -> int:
    """Returns a process exit status."""
    if not password:
        # Generate secure random password if not provided
        password = secrets.token_urlsafe(32)
        print("No CARDEX_PASSWORD env var set. Generated secure password:")
        print(f"  {password}")
        print("\nSave this password securely - it will not be shown again!\n")

    authenticator = Authenticator(QueryExecutor(engine))
    try:
        user_id = authenticator.register(username, password)
    except DuplicatePrincipal:
        print(f"User {username} already exists.")
        return 1
    except ValueError as e:
        print(f"Cannot create user: {e}")
        return 2

    print(f"User {username} created with id {user_id}.")
    return 0


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__.strip())
        sys.exit(2)
    sys.exit(create_user(sys.argv[1], os.getenv("CARDEX_PASSWORD")))
