# strava_miles/main.py
import sys
from datetime import datetime
from functools import partial

from strava_miles import config, fetch_data
from strava_miles.auth import TokenRefresher, persist_access_token
from strava_miles.exceptions import ConfigError, StravaError
from strava_miles.process_data import format_miles


def print_report(stats, year=None):
    year = year or datetime.now().year
    if stats.athlete_name:
        print(f"\n👤 Athlete: {stats.athlete_name}")
    if stats.location:
        print(f"📍 Location: {stats.location}")
    if stats.bio:
        print(f"📝 Bio: {stats.bio}")
    print(f"\n🎯 {year} Running Stats:")
    print(f"📏 Total Distance: {format_miles(stats.miles)} miles")
    print(f"🏃 Total Runs: {stats.run_count}")
    print(f"⏱️  Moving Time: {stats.hours:.1f} hours")
    print(f"⬆️  Elevation Gain: {stats.elevation_feet:,.0f} feet")


def main(environ=None, env_path=None, session=None):
    """
    Runs the YTD fetch once from the console.
    A refreshed access token is written back to the env file.
    """
    print("🏃 Testing Strava API locally...\n")

    # 1. Credentials
    try:
        credentials = config.load_credentials(environ)
    except ConfigError as e:
        print(e)
        return 1

    # 2. Fetch (refreshing the token at most once on 401)
    refresher = TokenRefresher(
        credentials,
        session=session,
        on_refresh=partial(persist_access_token, env_path or config.ENV_FILE)
    )
    print("📡 Fetching athlete data and year-to-date stats...")
    try:
        result = fetch_data.fetch_ytd_stats(credentials.access_token, refresher=refresher, session=session)
    except StravaError as e:
        print(f"❌ Error: {e}")
        return 1

    # 3. Report
    print_report(result.stats)
    return 0


if __name__ == "__main__":
    sys.exit(main())
