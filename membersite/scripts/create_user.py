"""
Create a member (e.g. the first admin, which the site itself cannot create). Run from project root:
  python -m membersite.scripts.create_user NAME EMAIL PASSWORD [role]
Example:
  python -m membersite.scripts.create_user root admin@example.com s3cret admin
"""
import argparse
import sys

from dotenv import load_dotenv

from membersite.core.config import get_settings
from membersite.core.database import build_engine, build_session_factory
from membersite.core.security import hash_password
from membersite.schemas.auth import SignupForm
from membersite.services.users import DuplicateEmailError, create_user
from membersite.services.validation import validate_form


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a site member outside the signup page.")
    parser.add_argument("name", help="Display name (1-20 chars)")
    parser.add_argument("email", help="Login email (must be unused)")
    parser.add_argument("password", help="Password (1-20 chars)")
    parser.add_argument("role", nargs="?", default="user", choices=["user", "admin"])
    args = parser.parse_args(argv)

    result = validate_form(
        SignupForm,
        {"name": args.name.strip(), "email": args.email.strip(), "password": args.password},
    )
    if not result.ok:
        print(result.error, file=sys.stderr)
        return 1
    form = result.value

    load_dotenv()
    engine = build_engine(get_settings())
    db = build_session_factory(engine)()
    try:
        user = create_user(db, form.name, form.email, hash_password(form.password), user_type=args.role)
    except DuplicateEmailError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
        engine.dispose()
    print(f"Created user '{user.name}' <{user.email}> with role '{user.user_type}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
