"""
Fallback Module
Fixed and seeded distributions returned when an analysis cannot produce a result.
"""

from typing import List, Tuple

import numpy as np

from .regions import DEFAULT_LOCALE, Region, region_label
from .results import OriginPortion

PRIMARY_FALLBACK: Tuple[Tuple[Region, int], ...] = (
    (Region.EUR, 35),
    (Region.EAS, 25),
    (Region.AFR, 20),
    (Region.AMR, 15),
    (Region.SAS, 5),
)

SEEDED_BASE_PERCENT = 20
SEEDED_MAX_JITTER = 3


def primary_fallback(locale: str = DEFAULT_LOCALE) -> List[OriginPortion]:
    """
    The documented fallback distribution of the autosomal analysis.

    Returns:
        Europe 35, East Asia 25, Africa 20, America 15, South Asia 5
    """
    return [OriginPortion(region_label(region, locale), percent) for region, percent in PRIMARY_FALLBACK]


def seeded_fallback(seed: int, locale: str = DEFAULT_LOCALE) -> List[OriginPortion]:
    """
    Near-uniform distribution over all regions with deterministic jitter.

    Every region but the last gets 20 plus a jitter drawn from a generator
    seeded with ``seed``; the last region takes the remainder, so the list
    always sums to 100 and the same seed always gives the same list.

    Args:
        seed: Non-negative seed derived from the analyzed input
        locale: Locale of the region labels

    Returns:
        One portion per region, in Region order
    """
    rng = np.random.default_rng(abs(int(seed)))
    regions = list(Region)
    jitter = rng.integers(-SEEDED_MAX_JITTER, SEEDED_MAX_JITTER + 1, size=len(regions) - 1)

    percents = [SEEDED_BASE_PERCENT + int(j) for j in jitter]
    percents.append(100 - sum(percents))

    return [OriginPortion(region_label(region, locale), percent) for region, percent in zip(regions, percents)]


def input_seed(data: bytes) -> int:
    """Seed for the seeded fallback: the number of non-header lines in the buffer."""
    return sum(1 for line in data.splitlines() if line.strip() and not line.startswith(b'#'))
