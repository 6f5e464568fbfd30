"""Create the first admin account from the command line.

Usage:
    python -m src.ft_admin.bootstrap --username admin --email admin@example.com --password 'S3cretPass'

Goes through UserService, so the same uniqueness checks and bcrypt hashing
apply as for accounts created over the API.
"""

import argparse
import asyncio
import logging

from src.ft_common.database import async_session_factory, engine
from src.ft_common.enums import UserRole
from src.ft_gateway.user.schemas import RegisterRequest
from src.ft_gateway.user.service import UserService

logger = logging.getLogger("ft.bootstrap")


async def create_admin(
    username: str,
    email: str,
    password: str,
    first_name: str | None = None,
    last_name: str | None = None,
) -> str:
    """Insert an admin user and return its id."""
    body = RegisterRequest(
        username=username,
        email=email,
        password=password,
        first_name=first_name,
        last_name=last_name,
    )
    async with async_session_factory() as db:
        async with db.begin():
            user = await UserService().create_user(
                db,
                body.username,
                body.email,
                body.password,
                UserRole.ADMIN,
                body.first_name,
                body.last_name,
            )
    return str(user.id)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Create an admin account")
    parser.add_argument("--username", required=True)
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--first-name")
    parser.add_argument("--last-name")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    async def _run() -> str:
        try:
            return await create_admin(
                args.username, args.email, args.password, args.first_name, args.last_name
            )
        finally:
            await engine.dispose()

    user_id = asyncio.run(_run())
    logger.info("Admin %s created with id %s", args.username, user_id)


if __name__ == "__main__":
    main()
