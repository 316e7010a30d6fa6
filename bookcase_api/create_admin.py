"""Create an Admin client from the command line.

Usage:
    python -m bookcase_api.create_admin <username> <password>
"""
import sys

from bookcase_api.core import config
from bookcase_api.database import SessionLocal, init_db
from bookcase_api.services.auth_service import AuthService


def main(argv: list[str] | None = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 2:
        print(__doc__.strip(), file=sys.stderr)
        sys.exit(2)

    username, password = args
    init_db()
    db = SessionLocal()
    try:
        client = AuthService(db).create_client(username, password, config.ADMIN_ROLE)
    finally:
        db.close()

    if client is None:
        print(f"Username {username!r} already exists.", file=sys.stderr)
        sys.exit(1)
    print(f"Created admin {username}.")


if __name__ == "__main__":
    main()
