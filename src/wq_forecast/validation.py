"""Advisory plausibility checks for forecast records."""

from __future__ import annotations

from .pollution_index import classify_category
from .records import BAIK, SEDANG, PollutionRecord


def validate_record(record: PollutionRecord) -> list[str]:
    """Return warnings where parameters contradict the record's index band.

    The record is never modified.
    """

    expected = classify_category(record.index)
    params = record.parameters
    warnings: list[str] = []

    if expected == BAIK:
        if params.ammonia > 0.5:
            warnings.append("Ammonia too high for Baik")
        if params.bod > 2.0:
            warnings.append("BOD too high for Baik")
        if params.do < 6.0:
            warnings.append("DO too low for Baik")
    elif expected == SEDANG:
        if params.ammonia > 1.5:
            warnings.append("Ammonia too high for Sedang")
        if params.bod > 6.0:
            warnings.append("BOD too high for Sedang")

    return warnings
