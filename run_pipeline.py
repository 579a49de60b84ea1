import sys

from strava_miles import config, fetch_data, publish_data
from strava_miles.auth import refresh_access_token
from strava_miles.exceptions import StravaError
from strava_miles.utils import get_logger

logger = get_logger("run_pipeline")


def main(environ=None, session=None):
    logger.info("--- Starting Strava Miles Pipeline ---")

    # 1. Config & Auth
    # Scheduled runs have no stored access token, so always start with a refresh
    try:
        credentials = config.load_credentials(environ)
        token = refresh_access_token(credentials, session=session)
        result = fetch_data.fetch_ytd_stats(
            token,
            refresher=None,
            session=session
        )
    except StravaError as e:
        logger.error("Setup failed: %s", e)
        return 1

    # 2. Publish the static artifact the dashboard reads
    publish_data.write_artifact(result.stats, config.STATS_FILE)
    publish_data.publish_dashboard(result.stats, config.IMAGES_DIR)

    logger.info("Pipeline complete. %.1f miles year-to-date.", result.stats.miles)
    return 0


if __name__ == "__main__":
    sys.exit(main())
