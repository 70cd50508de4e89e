"""
Create (or promote) the bootstrap admin account so the verification admin
routes are usable on a fresh deployment. Idempotent: an existing account with
the same username is promoted and its password left untouched.
"""
import os

from rapport.core import identity
from rapport.core.errors import ConflictError
from rapport.store import user_repo

ADMIN_USERNAME = os.getenv("SEED_ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD", "")


def main():
    if not ADMIN_PASSWORD:
        raise SystemExit("SEED_ADMIN_PASSWORD must be set")
    try:
        user = user_repo.create(ADMIN_USERNAME, identity.hash_password(ADMIN_PASSWORD), is_admin=True)
        print(f"OK: created admin {user.username} ({user.id})")
    except ConflictError:
        user = user_repo.get_by_username(ADMIN_USERNAME)
        user_repo.set_admin(user.id, True)
        print(f"OK: promoted existing user {user.username} ({user.id}) to admin")
    return user

if __name__ == "__main__":
    main()
