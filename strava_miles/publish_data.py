import json
import os
import tempfile
from datetime import datetime, timezone

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import pandas as pd

from strava_miles.exceptions import ArtifactNotFoundError
from strava_miles.process_data import summary_rows
from strava_miles.utils import get_logger

logger = get_logger(__name__)

# ==============================================================================
# STATIC ARTIFACT
# ==============================================================================

def build_artifact(stats, generated_at=None):
    generated_at = generated_at or datetime.now(timezone.utc)
    return {
        'totalMiles': stats.miles,
        'lastUpdated': generated_at.isoformat(),
        'athleteName': stats.athlete_name,
        'totalRuns': stats.run_count,
        'movingHours': stats.hours,
        'elevationFeet': stats.elevation_feet,
        'year': generated_at.year,
    }


def write_artifact(stats, path, generated_at=None):
    """
    Writes the JSON document the dashboard reads in static mode.
    The file is replaced whole so the display layer never reads a partial write.
    """
    artifact = build_artifact(stats, generated_at)
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=directory, suffix='.tmp')
    try:
        with os.fdopen(fd, 'w') as f:
            json.dump(artifact, f, indent=2)
        os.replace(tmp_path, path)
    except BaseException:
        os.unlink(tmp_path)
        raise
    logger.info("💾 Wrote %s", path)
    return artifact


def read_artifact(path):
    try:
        with open(path, 'r') as f:
            artifact = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ArtifactNotFoundError(f"Stats not generated yet ({path})") from e

    if 'totalMiles' not in artifact or 'lastUpdated' not in artifact:
        raise ArtifactNotFoundError(f"Stats file {path} is missing totalMiles/lastUpdated")
    return artifact


# ==============================================================================
# VISUALIZATION ENGINE
# ==============================================================================

def create_mpl_table(data, columns, output_dir, filename, footer_text=None, fig_width=6):
    """
    Generates a clean table image using Matplotlib.
    """
    if not data:
        logger.warning("⚠️ No data provided for %s", filename)
        return None

    os.makedirs(output_dir, exist_ok=True)

    df = pd.DataFrame(data)
    # Ensure all requested columns exist, filling missing with empty string
    for col in columns:
        if col not in df.columns:
            df[col] = ""
    df = df[columns]

    row_height = 0.5
    header_height = 0.8
    padding = 0.5
    fig_height = (len(df) * row_height) + header_height + padding

    fig, ax = plt.subplots(figsize=(fig_width, fig_height))
    ax.axis('tight')
    ax.axis('off')

    cell_text = [[str(cell) for cell in row] for row in df.itertuples(index=False)]

    table = ax.table(
        cellText=cell_text,
        colLabels=columns,
        loc='center',
        cellLoc='center',
        colColours=['#e6e6e6'] * len(columns)
    )
    table.auto_set_font_size(False)
    table.set_fontsize(12)
    table.scale(1.2, 1.8)

    if footer_text:
        fig.text(0.5, 0.02, footer_text, ha='center', fontsize=8, color='gray')

    save_path = os.path.join(output_dir, filename)
    plt.savefig(save_path, bbox_inches='tight', pad_inches=0.1, dpi=150)
    plt.close(fig)
    logger.info("📸 Saved image: %s", save_path)
    return save_path


def publish_dashboard(stats, output_dir, year=None):
    """Renders the year-to-date summary table image."""
    year = year or datetime.now(timezone.utc).year
    footer = f"{year} Strava running data"
    if stats.athlete_name:
        footer = f"{stats.athlete_name} · {footer}"

    return create_mpl_table(
        data=summary_rows(stats),
        columns=['Metric', 'Value'],
        output_dir=output_dir,
        filename='ytd_stats.png',
        footer_text=footer
    )
