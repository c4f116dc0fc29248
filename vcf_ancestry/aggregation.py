"""
Aggregation Module
Folds per-marker likelihoods into regional scores and normalizes them to percentages.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional

from .reference_data import MarkerRecord
from .regions import DEFAULT_LOCALE, Region, region_label
from .results import OriginPortion
from .scoring import score_genotype

logger = logging.getLogger(__name__)


@dataclass
class RegionScore:
    """Running totals for one region during an analysis."""

    region: Region
    total_score: float = 0.0
    marker_count: int = 0
    confidence_sum: float = 0.0

    @property
    def average_score(self) -> float:
        return self.total_score / self.marker_count if self.marker_count else 0.0

    @property
    def average_confidence(self) -> float:
        return self.confidence_sum / self.marker_count if self.marker_count else 0.0

    @property
    def percentage(self) -> float:
        """Candidate percentage before the low-signal cutoff and rescaling."""
        return max(self.average_score * 100.0, 0.0)


class AncestryAggregator:
    """
    Accumulates genotype likelihoods across matched markers.
    Create one aggregator per analysis; it is not meant to be shared.
    """

    def __init__(self, low_signal_cutoff: float = 0.5):
        """
        Initialize the aggregator.

        Args:
            low_signal_cutoff: Candidate percentages at or below this value are dropped
        """
        self.low_signal_cutoff = low_signal_cutoff
        self.scores: Dict[Region, RegionScore] = {region: RegionScore(region) for region in Region}
        self.marker_count = 0

    def add_marker(self, genotype: str, marker: MarkerRecord):
        """
        Add one matched marker's evidence to every region it has a frequency for.

        Args:
            genotype: Sample genotype at the marker
            marker: Panel marker with per-region frequencies
        """
        for region, likelihood in score_genotype(genotype, marker.population_frequencies).items():
            score = self.scores[region]
            score.total_score += likelihood
            score.marker_count += 1
            score.confidence_sum += marker.quality
        self.marker_count += 1

    def candidate_percentages(self) -> Dict[Region, float]:
        """
        Percentage candidates of regions that have markers and clear the cutoff.

        Returns:
            Dictionary mapping region to candidate percentage, in Region order
        """
        candidates = {}
        for region, score in self.scores.items():
            if score.marker_count == 0:
                continue
            percentage = score.percentage
            if percentage > self.low_signal_cutoff:
                candidates[region] = percentage
            else:
                logger.debug(f"Dropping low-signal region {region.value} ({percentage:.3f}%)")
        return candidates

    def normalize(self, locale: str = DEFAULT_LOCALE) -> Optional[List[OriginPortion]]:
        """
        Rescale the surviving candidates to whole percentages summing to 100.

        Args:
            locale: Locale of the region labels

        Returns:
            Portions sorted by descending percent, or None when no region
            carries enough signal (the caller substitutes a fallback)
        """
        percents = normalize_percentages(self.candidate_percentages())
        if not percents:
            return None

        return [
            OriginPortion(region=region_label(region, locale), percent=percent)
            for region, percent in percents
        ]


def normalize_percentages(candidates: Dict[Region, float]) -> List[tuple]:
    """
    Convert candidate percentages into integers summing to exactly 100.

    Each candidate is rescaled to its share of the total and floored; the
    shortfall left by flooring goes to the region with the largest candidate
    (earliest in Region order on ties). Regions left at 0 are dropped.

    Args:
        candidates: Region to positive candidate percentage

    Returns:
        List of (region, percent) tuples, sorted by descending percent
    """
    total = sum(candidates.values())
    if not candidates or total <= 0:
        return []

    percents = {
        region: int(math.floor(value * 100.0 / total))
        for region, value in candidates.items()
    }

    residual = 100 - sum(percents.values())
    if residual:
        order = list(Region)
        leader = max(candidates, key=lambda r: (candidates[r], -order.index(r)))
        percents[leader] += residual

    ranked = [(region, percent) for region, percent in percents.items() if percent > 0]
    ranked.sort(key=lambda item: item[1], reverse=True)
    return ranked
