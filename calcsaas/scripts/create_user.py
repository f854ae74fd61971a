"""
Create a user without going through the HTTP API. Run from project root:
  python -m calcsaas.scripts.create_user USERNAME EMAIL PASSWORD
Example:
  python -m calcsaas.scripts.create_user alice alice@example.com s3cret-pass
"""
import argparse
import sys

from calcsaas.core.config import get_settings
from calcsaas.core.database import build_engine, build_session_factory
from calcsaas.core.errors import ServiceError
from calcsaas.models import Base
from calcsaas.services.credentials import CredentialStore


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a calculator user.")
    parser.add_argument("username", help="Username (unique, case-sensitive)")
    parser.add_argument("email", help="Email (unique, case-sensitive)")
    parser.add_argument("password", help="Password (at least 6 characters)")
    args = parser.parse_args(argv)

    settings = get_settings()
    engine = build_engine(settings)
    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(engine)
    db = build_session_factory(engine)()
    try:
        store = CredentialStore(db, bcrypt_rounds=settings.BCRYPT_ROUNDS)
        user = store.create_user(args.username.strip(), args.email.strip(), args.password)
        print(f"Created user '{user.username}' with id {user.id}.")
        return 0
    except ServiceError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
