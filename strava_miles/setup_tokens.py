"""
One-time Strava authorization.

Prints the authorize URL, asks for the code from the redirect, exchanges it
and stores the refresh and access tokens in the env file.
"""
import os
import sys

from dotenv import set_key

from strava_miles import config
from strava_miles.auth import build_authorize_url, exchange_code
from strava_miles.exceptions import AuthError


def save_tokens(env_path, tokens):
    set_key(env_path, config.ENV_KEYS['refresh_token'], tokens['refresh_token'], quote_mode='never')
    set_key(env_path, config.ENV_KEYS['access_token'], tokens['access_token'], quote_mode='never')


def main(prompt=input, env_path=None, session=None):
    env_path = env_path or config.ENV_FILE
    client_id = os.getenv('STRAVA_CLIENT_ID')
    client_secret = os.getenv('STRAVA_CLIENT_SECRET')
    if not client_id or not client_secret:
        print(f"❌ ERROR: STRAVA_CLIENT_ID / STRAVA_CLIENT_SECRET missing from {env_path}")
        return 1

    # 1. GENERATE THE AUTHORIZATION URL
    print("--- Strava Auth Setup ---")
    print(f"Target File: {env_path}\n")
    print("1. Go to the following URL in your browser to authorize:")
    print(build_authorize_url(client_id))

    # 2. USER INPUT
    print("\n2. After you click 'Authorize', you will be redirected to a localhost page that fails.")
    print("   Copy the 'code' from the URL (everything after code= and before &scope)")
    auth_code = prompt("\n   Paste the 'code' here: ").strip()

    # 3. EXCHANGE CODE FOR TOKENS
    print("\n3. Exchanging code for tokens...")
    try:
        tokens = exchange_code(client_id, client_secret, auth_code, session=session)
    except AuthError as e:
        print(f"\nError exchanging token: {e}")
        if e.body:
            print(e.body)
        return 1

    save_tokens(env_path, tokens)
    print(f"\nSUCCESS! Tokens saved to '{env_path}'")
    return 0


if __name__ == "__main__":
    sys.exit(main())
