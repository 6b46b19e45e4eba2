"""
Create a user without going through signup (e.g. the first SUPER_ADMIN). Run from project root:
  python -m rawa.scripts.create_user USERNAME PASSWORD [role] [--email EMAIL] [--phone PHONE]
Example:
  python -m rawa.scripts.create_user root your-secure-password SUPER_ADMIN --email root@example.com
Accounts created here are marked email-verified.
"""
import argparse
import sys

from sqlalchemy import or_

from rawa.core.database import SessionLocal
from rawa.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    hash_password,
)
from rawa.models.user import User
from rawa.schemas.user import USER_ROLES


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a Rawa user (bypasses signup and verification).")
    parser.add_argument("username", help=f"Username ({USERNAME_MIN_LEN}-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("role", nargs="?", default="SUPER_ADMIN", choices=USER_ROLES)
    parser.add_argument("--email", default=None)
    parser.add_argument("--phone", default=None)
    args = parser.parse_args()

    username = args.username.strip()
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        clauses = [User.username == username]
        if args.email:
            clauses.append(User.email == args.email)
        if db.query(User.id).filter(or_(*clauses)).first() is not None:
            print(f"Username '{username}' or that email already exists.", file=sys.stderr)
            return 1
        user = User(
            username=username,
            email=args.email,
            phone=args.phone,
            password_hash=hash_password(args.password),
            role=args.role,
            email_verified=True,
            status="ACTIVE",
        )
        db.add(user)
        db.commit()
        print(f"Created user '{username}' with role '{args.role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
