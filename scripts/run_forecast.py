"""Forecast every location in the configured history workbook."""

import logging
import sys
from pathlib import Path

from wq_forecast.config import load_config
from wq_forecast.data_processing import category_distribution
from wq_forecast.pipeline import run_forecast_pipeline

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main(argv=None):
    """Run the forecast pipeline; an optional argument overrides the config path."""
    argv = sys.argv[1:] if argv is None else argv
    config_path = Path(argv[0]) if argv else None

    try:
        config = load_config(config_path)
        results = run_forecast_pipeline(config=config)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Error in forecast pipeline: {e}", exc_info=True)
        return 1

    for location, series in results.items():
        source = "default profile" if series.used_default else "reference models"
        logger.info(f"{location}: {len(series)} days from {source}, {category_distribution(series)}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
