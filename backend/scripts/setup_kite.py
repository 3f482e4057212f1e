#!/usr/bin/env python3
"""Kite Connect setup script.

Stores the Kite API key/secret and links a user's Kite account.

Usage:
    1. Create an app at https://developers.kite.trade/ and note its
       API key and secret
    2. Run this script with the username to link:
         python -m scripts.setup_kite --username alice
    3. Open the printed login URL, log in to Kite, and paste the
       ``request_token`` from the redirect URL when prompted

Kite access tokens expire daily, so step 3 has to be repeated each
trading day before the scheduled sync runs.
"""

import argparse
import sys

from config import settings
from database import init_db, session_scope
from repositories.credential_repository import CredentialRepository
from services.auth_service import KiteAuthService
from services.credential_manager import set_credential


def _offer_keychain_store(credentials: dict[str, str]) -> None:
    """Prompt the user to store credentials in the system keychain."""
    answer = input("\nStore these credentials in the keychain? [Y/n] ").strip().lower()
    if answer in ("", "y", "yes"):
        for key, value in credentials.items():
            if set_credential(key, value):
                print(f"  Stored {key} in keychain")
            else:
                print(f"  Failed to store {key}")
    else:
        print("  Skipped keychain storage.")


def _ensure_app_credentials() -> None:
    """Prompt for the API key/secret if they are not configured yet."""
    if settings.KITE_API_KEY and settings.KITE_API_SECRET:
        return

    print("Kite API credentials are not configured.")
    api_key = input("Kite API key: ").strip()
    api_secret = input("Kite API secret: ").strip()
    if not api_key or not api_secret:
        print("Error: API key and secret are both required")
        sys.exit(1)

    settings.KITE_API_KEY = api_key
    settings.KITE_API_SECRET = api_secret
    _offer_keychain_store({"KITE_API_KEY": api_key, "KITE_API_SECRET": api_secret})


def main(argv: list[str] | None = None) -> None:
    """Link a user's Kite account by completing the login round trip."""
    parser = argparse.ArgumentParser(description="Link a Kite account to a user.")
    parser.add_argument("--username", required=True, help="Local username to link")
    args = parser.parse_args(argv)

    print("Kite Connect Setup")
    print("=" * 50)
    print()

    _ensure_app_credentials()
    init_db()
    auth_service = KiteAuthService()

    with session_scope() as db:
        credentials = CredentialRepository(db)
        user = credentials.get_by_username(args.username)
        if user is None:
            user = credentials.create_user(args.username)
            db.commit()
            print(f"Created user {args.username}")

        state, login_url = auth_service.start_login(db, user)

        print()
        print("Open this URL in a browser and log in to Kite:")
        print()
        print(f"  {login_url}")
        print()
        print("After login Kite redirects to your app's redirect URL.")
        request_token = input("Paste the request_token from that URL: ").strip()

        if not request_token:
            print("Error: No request token provided")
            sys.exit(1)

        outcome = auth_service.complete_login(db, request_token, state)

    print()
    if outcome.succeeded:
        print(f"Success! {args.username} is linked to Kite.")
    else:
        print(f"Error: {outcome.message}")
        print()
        print("Common issues:")
        print("  - The request token was already used (tokens are single-use)")
        print("  - The API secret does not match the API key")
        print("  - Network connectivity issues")
        sys.exit(1)


if __name__ == "__main__":
    main()
