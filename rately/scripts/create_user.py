"""
Create an account from the command line (e.g. an extra admin). Run from project root:
  python -m rately.scripts.create_user NAME EMAIL PASSWORD ADDRESS [role]
Example:
  python -m rately.scripts.create_user "Site Administrator" ops@example.com 'Secret@123' "1 Main St" system_admin
"""
import argparse
import sys

from pydantic import ValidationError

from rately.core.database import SessionLocal
from rately.core.errors import ConflictError
from rately.core.roles import Role
from rately.schemas.user import AdminUserCreate
from rately.services.users import create_user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Rately user.")
    parser.add_argument("name", help="Display name (3-60 chars)")
    parser.add_argument("email", help="Unique email address")
    parser.add_argument("password", help="8-16 chars, one uppercase, one special character")
    parser.add_argument("address", help="Postal address (up to 400 chars)")
    parser.add_argument(
        "role",
        nargs="?",
        default=Role.NORMAL_USER.value,
        choices=[r.value for r in Role],
    )
    args = parser.parse_args(argv)

    try:
        body = AdminUserCreate(
            name=args.name,
            email=args.email,
            password=args.password,
            address=args.address,
            role=Role(args.role),
        )
    except ValidationError as e:
        print(e.errors()[0]["msg"].removeprefix("Value error, "), file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        user = create_user(db, body)
    except ConflictError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created user '{user.email}' with role '{user.role.value}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
