# strava_miles/process_data.py
from dataclasses import dataclass

# 1 meter = 0.000621371 miles
METERS_TO_MILES = 0.000621371
# 1 meter = 3.28084 feet
METERS_TO_FEET = 3.28084


@dataclass(frozen=True)
class AthleteStats:
    distance_meters: float
    miles: float
    run_count: int
    moving_time_seconds: int
    hours: float
    elevation_meters: float
    elevation_feet: float
    athlete_id: int | None = None
    athlete_name: str = ''
    location: str = ''
    bio: str = ''


def meters_to_miles(meters):
    # Rounding happens only at display time
    return meters * METERS_TO_MILES


def meters_to_feet(meters):
    return meters * METERS_TO_FEET


def seconds_to_hours(seconds):
    return seconds / 3600


def athlete_display_name(athlete):
    name = f"{athlete.get('firstname') or ''} {athlete.get('lastname') or ''}".strip()
    return name or athlete.get('username') or ''


def athlete_location(athlete):
    parts = [athlete.get('city'), athlete.get('state')]
    return ', '.join(p for p in parts if p)


def summarize_ytd_totals(athlete, stats):
    """
    Builds AthleteStats from the /athlete and /athletes/{id}/stats payloads.
    Strava omits ytd_run_totals for athletes with no runs this year; that reads as zeros.
    """
    totals = (stats or {}).get('ytd_run_totals') or {}

    distance = totals.get('distance') or 0
    moving_time = totals.get('moving_time') or 0
    elevation = totals.get('elevation_gain') or 0

    return AthleteStats(
        distance_meters=float(distance),
        miles=meters_to_miles(distance),
        run_count=int(totals.get('count') or 0),
        moving_time_seconds=int(moving_time),
        hours=seconds_to_hours(moving_time),
        elevation_meters=float(elevation),
        elevation_feet=meters_to_feet(elevation),
        athlete_id=athlete.get('id'),
        athlete_name=athlete_display_name(athlete),
        location=athlete_location(athlete),
        bio=(athlete.get('bio') or '').strip(),
    )


def format_miles(miles):
    return f"{miles:,.1f}"


def summary_rows(stats):
    """Rows for the console report and the published table image."""
    return [
        {'Metric': 'Total Distance', 'Value': f"{format_miles(stats.miles)} miles"},
        {'Metric': 'Total Runs', 'Value': f"{stats.run_count:,}"},
        {'Metric': 'Moving Time', 'Value': f"{stats.hours:,.1f} hours"},
        {'Metric': 'Elevation Gain', 'Value': f"{stats.elevation_feet:,.0f} ft"},
    ]
