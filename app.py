# app.py
import os

import streamlit as st

from strava_miles import config, presenter
from strava_miles.auth import TokenRefresher
from strava_miles.cache import DistanceCache, SessionStateStore
from strava_miles.exceptions import ConfigError
from strava_miles.fetch_data import make_stats_fetcher

# "static" reads the file written by run_pipeline.py; "live" calls Strava from this process
MODE = os.getenv('STRAVA_DASHBOARD_MODE', 'static')


def get_cache():
    if 'strava-cache' not in st.session_state:
        credentials = config.load_credentials()
        refresher = TokenRefresher(credentials)
        st.session_state['strava-cache'] = DistanceCache(
            make_stats_fetcher(refresher),
            store=SessionStateStore(st.session_state),
        )
    return st.session_state['strava-cache']


def request_refresh():
    # Runs before the script body, so the rerun makes a single forced fetch
    st.session_state['force-refresh'] = True


def render(view, cooldown):
    if view.status == presenter.ERROR:
        st.error(f"❌ Error: {view.error}")
        if view.rate_limited:
            st.warning(presenter.rate_limit_hint(cooldown))
        elif view.can_retry:
            st.button("Try Again", on_click=request_refresh)
        return

    last_updated = None
    if view.last_updated:
        last_updated = f"Last updated: {view.last_updated.astimezone().strftime('%Y-%m-%d %H:%M:%S')}"
    st.metric(view.athlete_name or "Total Mileage", view.miles_label)
    if last_updated:
        st.caption(last_updated)
    if MODE == 'live':
        st.caption(f"💾 Data cached for {round(cooldown / 60)} minutes to protect API limits")


st.set_page_config(page_title="Strava Miles", page_icon="🏃")
st.title("🏃 Strava Miles")
st.subheader("Year-to-Date Running Mileage")

if MODE == 'live':
    try:
        cache = get_cache()
    except ConfigError as e:
        st.error(str(e))
        st.stop()
    force = st.session_state.pop('force-refresh', False)
    with st.spinner("🏃 Fetching your Strava data..."):
        view = presenter.load_live_view(cache, force_refresh=force)
    render(view, cache.cooldown)
else:
    render(presenter.load_static_view(config.STATS_FILE), config.CACHE_COOLDOWN)

if os.path.exists(os.path.join(config.IMAGES_DIR, 'ytd_stats.png')):
    st.image(os.path.join(config.IMAGES_DIR, 'ytd_stats.png'))
