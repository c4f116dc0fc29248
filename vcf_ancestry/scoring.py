"""
Scoring Module
Hardy-Weinberg genotype likelihoods under per-region allele frequencies.

Each marker is treated as independent evidence; no linkage or
population-structure model is applied.
"""

from typing import Dict, Mapping, Optional, Union

import numpy as np

from .regions import Region

ALT_ALLELE_COUNTS = {
    '0/0': 0,
    '0/1': 1,
    '1/0': 1,
    '1/1': 2,
}


def alternate_allele_count(genotype: str) -> Optional[int]:
    """Number of alternate alleles in an unphased biallelic genotype, or None."""
    return ALT_ALLELE_COUNTS.get(genotype)


def hardy_weinberg(count: int, frequency: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """
    Genotype probability for an alternate-allele count of 0, 1 or 2.

    Works elementwise when ``frequency`` is an array.
    """
    if count == 0:
        return (1.0 - frequency) ** 2
    if count == 2:
        return frequency ** 2
    return 2.0 * frequency * (1.0 - frequency)


def genotype_likelihood(genotype: str, frequency: float) -> float:
    """
    Probability of a genotype given the alternate allele frequency.

    '0/0' -> (1 - f)^2, '1/1' -> f^2, '0/1' and '1/0' -> 2f(1 - f),
    any other genotype -> 0.0.

    Args:
        genotype: GT string such as '0/1'
        frequency: Alternate allele frequency in [0, 1]

    Returns:
        Likelihood in [0, 1]
    """
    count = alternate_allele_count(genotype)
    if count is None:
        return 0.0
    return float(hardy_weinberg(count, float(frequency)))


def score_genotype(genotype: str, frequencies: Mapping[Region, float]) -> Dict[Region, float]:
    """
    Likelihood of a genotype in every region of a marker.

    Args:
        genotype: GT string of the sample
        frequencies: Alternate allele frequency per region

    Returns:
        Dictionary mapping each region to its likelihood
    """
    regions = list(frequencies)
    count = alternate_allele_count(genotype)
    if count is None:
        return {region: 0.0 for region in regions}

    freqs = np.fromiter((frequencies[r] for r in regions), dtype=float, count=len(regions))
    likelihoods = hardy_weinberg(count, freqs)
    return {region: float(value) for region, value in zip(regions, likelihoods)}
