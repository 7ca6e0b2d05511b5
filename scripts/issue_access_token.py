"""Utility script to issue a bearer token for a development user."""

from __future__ import annotations

import argparse
from datetime import timedelta

from sqlalchemy.exc import SQLAlchemyError

from waffl.application.use_cases.push import register_device_token
from waffl.infrastructure.database import SessionLocal, initialize_database
from waffl.infrastructure.security import create_access_token


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for token issuance."""

    parser = argparse.ArgumentParser(
        description="Issue an access token for the Waffl notifications API.",
    )
    parser.add_argument("user_id", help="Identifier of the user the token represents")
    parser.add_argument("--name", default=None, help="Display name (defaults to the user id)")
    parser.add_argument("--picture", default=None, help="Profile image URL (optional)")
    parser.add_argument(
        "--minutes",
        type=int,
        default=None,
        help="Token lifetime in minutes (defaults to ACCESS_TOKEN_EXPIRE_MINUTES)",
    )
    parser.add_argument(
        "--device-token",
        default=None,
        help="Also register this push token for the user",
    )
    parser.add_argument("--platform", default="iOS", help="Platform of the device token")
    return parser.parse_args()


def main() -> None:
    """Print a token for the provided user and optionally store a device token."""

    args = parse_args()

    if args.device_token:
        initialize_database()
        session = SessionLocal()
        try:
            saved = register_device_token(
                session, user_id=args.user_id, token=args.device_token, platform=args.platform
            )
        except ValueError as exc:
            session.rollback()
            raise SystemExit(f"Could not register the device token: {exc}") from exc
        except SQLAlchemyError as exc:
            session.rollback()
            raise SystemExit(f"Error saving the device token: {exc}") from exc
        else:
            print(f"Device token stored for {saved.user_id}: {saved.token_prefix}...")
        finally:
            session.close()

    token = create_access_token(
        args.user_id,
        name=args.name or args.user_id,
        picture=args.picture,
        expires_delta=timedelta(minutes=args.minutes) if args.minutes else None,
    )
    print(token)


if __name__ == "__main__":
    main()
