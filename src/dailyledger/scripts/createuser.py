"""Interactive command for creating a login user."""

import asyncio
import re
import sys
from getpass import getpass

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from dailyledger.core.db import AsyncSessionLocal
from dailyledger.core.logging import configure_logging, get_logger
from dailyledger.core.security import MIN_PASSWORD_LENGTH, hash_password
from dailyledger.models.user import User

logger = get_logger(__name__)

USERNAME_PATTERN = re.compile(r"^[a-z0-9._-]{3,50}$")


def prompt_for_username() -> str:
    while True:
        username = input("Username: ").strip().lower()

        if not USERNAME_PATTERN.match(username):
            print("❌ 3-50 characters: letters, digits, '.', '_' or '-'")
            continue

        return username


def prompt_for_password() -> str:
    while True:
        password = getpass("Password: ")

        if len(password) < MIN_PASSWORD_LENGTH:
            print(f"❌ Password must be at least {MIN_PASSWORD_LENGTH} characters")
            continue

        if password != getpass("Password (confirm): "):
            print("❌ Passwords don't match")
            continue

        return password


async def create_user() -> None:
    print("\n" + "=" * 50)
    print("Daily Ledger - Create user")
    print("=" * 50 + "\n")

    async with AsyncSessionLocal() as db:
        username = prompt_for_username()

        result = await db.execute(select(User).where(User.username == username))
        if result.scalar_one_or_none():
            print(f"❌ User '{username}' already exists\n")
            return

        display_name = input("Display name (shown in the audit trail): ").strip()
        password = prompt_for_password()

        user = User(
            username=username,
            display_name=display_name,
            hashed_password=hash_password(password),
            is_active=True,
        )
        db.add(user)
        await db.commit()

        logger.info("user.created", username=username, user_id=str(user.id))
        print("\n✅ User created successfully!")
        print(f"   Username: {username}")
        print(f"   ID: {user.id}\n")


def main() -> None:
    configure_logging()
    try:
        asyncio.run(create_user())
    except KeyboardInterrupt:
        print("\n\n❌ Cancelled\n")
        sys.exit(1)
    except SQLAlchemyError as e:
        logger.error("createuser_error", error=str(e))
        print(f"\n❌ Error: {e}\n")
        sys.exit(1)


if __name__ == "__main__":
    main()
