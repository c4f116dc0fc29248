"""
Reference Data Module
Marker reference panel: known SNP identifiers with per-region allele frequencies.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Union

import numpy as np
import pandas as pd

from .exceptions import MarkerPanelError
from .regions import Region

logger = logging.getLogger(__name__)

PANEL_COLUMNS = ['variant_id', 'chromosome', 'position', 'ancestry_informative', 'quality']
DEFAULT_PANEL_RESOURCE = 'marker_panel.csv'


@dataclass(frozen=True)
class MarkerRecord:
    """A panel marker and its allele frequency in every reference region."""

    variant_id: str
    chromosome: str
    position: int
    population_frequencies: Mapping[Region, float]
    ancestry_informative: bool
    quality: float


@dataclass(frozen=True)
class MarkerStats:
    """Summary statistics of a loaded marker panel."""

    total_markers: int
    loaded_markers: int
    ancestry_informative_markers: int
    average_quality: float
    cache_size: int


class MarkerReferenceTable:
    """
    Read-only lookup table of panel markers keyed by variant identifier.
    Built once and shared between analyses; nothing mutates it after construction.
    """

    def __init__(self, markers: Iterable[MarkerRecord], total_markers: Optional[int] = None):
        """
        Initialize the table.

        Args:
            markers: Marker records; identifiers must be unique
            total_markers: Size of the source panel if larger than what was loaded
        """
        table: Dict[str, MarkerRecord] = {}
        for marker in markers:
            if marker.variant_id in table:
                raise MarkerPanelError(f"Duplicate marker identifier: {marker.variant_id}")
            table[marker.variant_id] = marker

        self._markers = MappingProxyType(table)
        self._total_markers = total_markers if total_markers is not None else len(table)

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame) -> "MarkerReferenceTable":
        """
        Build a table from a panel DataFrame.

        Expected columns: variant_id, chromosome, position, one column per
        region code (EUR, EAS, SAS, AFR, AMR), and optionally
        ancestry_informative and quality.

        Args:
            df: Panel DataFrame

        Returns:
            MarkerReferenceTable
        """
        df = df.copy()
        df.columns = df.columns.str.strip()

        missing = [c for c in ['variant_id', 'chromosome', 'position'] if c not in df.columns]
        region_columns = [c for c in df.columns if c not in PANEL_COLUMNS]
        if missing:
            raise MarkerPanelError(f"Marker panel is missing columns: {', '.join(missing)}")
        if not region_columns:
            raise MarkerPanelError("Marker panel has no region frequency columns")

        try:
            regions = [Region.from_code(c) for c in region_columns]
        except ValueError as e:
            raise MarkerPanelError(str(e)) from e

        freqs = df[region_columns].apply(pd.to_numeric, errors='coerce').to_numpy(dtype=float)
        invalid = np.isnan(freqs) | (freqs < 0.0) | (freqs > 1.0)
        if invalid.any():
            bad_ids = df.loc[invalid.any(axis=1), 'variant_id'].astype(str).tolist()
            raise MarkerPanelError(
                f"Allele frequencies must lie in [0, 1]; offending markers: {', '.join(bad_ids[:5])}"
            )

        if 'ancestry_informative' not in df.columns:
            df['ancestry_informative'] = True
        if 'quality' not in df.columns:
            df['quality'] = 95.0

        markers = []
        for row, row_freqs in zip(df.itertuples(index=False), freqs):
            try:
                position = int(row.position)
            except (TypeError, ValueError) as e:
                raise MarkerPanelError(
                    f"Invalid position for marker {row.variant_id}: {row.position!r}"
                ) from e
            markers.append(MarkerRecord(
                variant_id=str(row.variant_id).strip(),
                chromosome=str(row.chromosome).strip(),
                position=position,
                population_frequencies=MappingProxyType(
                    {region: float(f) for region, f in zip(regions, row_freqs)}
                ),
                ancestry_informative=_parse_flag(row.ancestry_informative),
                quality=float(row.quality),
            ))

        return cls(markers)

    @classmethod
    def from_csv(cls, filepath: Union[str, Path]) -> "MarkerReferenceTable":
        """Load a marker panel from a CSV file."""
        df = pd.read_csv(filepath, dtype={'variant_id': str, 'chromosome': str})
        table = cls.from_dataframe(df)
        logger.info(f"Loaded {len(table)} markers from {filepath}")
        return table

    @classmethod
    def default(cls) -> "MarkerReferenceTable":
        """
        The marker panel shipped with the package.

        The CSV is read on the first call only; later calls return the same
        table, which is safe to share because it is never mutated.
        """
        return _packaged_panel()

    def __len__(self) -> int:
        return len(self._markers)

    def __contains__(self, variant_id: object) -> bool:
        return variant_id in self._markers

    def lookup(self, variant_id: str) -> Optional[MarkerRecord]:
        """Return the panel marker for an identifier, or None."""
        return self._markers.get(variant_id)

    def is_known_marker(self, variant_id: str) -> bool:
        return variant_id in self._markers

    def population_frequencies(self, variant_id: str) -> Optional[Mapping[Region, float]]:
        """Return the per-region allele frequencies of a marker, or None."""
        marker = self._markers.get(variant_id)
        return marker.population_frequencies if marker is not None else None

    def markers_for_population(self, region: Region, threshold: float = 0.5) -> List[MarkerRecord]:
        """
        Get markers whose allele frequency in a region exceeds a threshold.

        Args:
            region: Reference region
            threshold: Exclusive lower bound on the frequency

        Returns:
            List of matching markers in panel order
        """
        return [
            marker for marker in self._markers.values()
            if marker.population_frequencies.get(region, 0.0) > threshold
        ]

    def get_stats(self) -> MarkerStats:
        """Get statistics about the loaded panel."""
        qualities = [m.quality for m in self._markers.values()]

        return MarkerStats(
            total_markers=self._total_markers,
            loaded_markers=len(self._markers),
            ancestry_informative_markers=sum(
                1 for m in self._markers.values() if m.ancestry_informative
            ),
            average_quality=float(np.mean(qualities)) if qualities else 0.0,
            cache_size=len(self._markers),
        )

    def to_dataframe(self) -> pd.DataFrame:
        """Return the panel as a DataFrame with one column per region."""
        rows = []
        for marker in self._markers.values():
            row = {
                'variant_id': marker.variant_id,
                'chromosome': marker.chromosome,
                'position': marker.position,
            }
            for region in Region:
                row[region.value] = marker.population_frequencies.get(region, np.nan)
            row['ancestry_informative'] = marker.ancestry_informative
            row['quality'] = marker.quality
            rows.append(row)

        columns = ['variant_id', 'chromosome', 'position'] + [r.value for r in Region] + \
            ['ancestry_informative', 'quality']
        return pd.DataFrame(rows, columns=columns)


def _parse_flag(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes', 'y')
    return bool(value)


@lru_cache(maxsize=1)
def _packaged_panel() -> MarkerReferenceTable:
    resource = resources.files('vcf_ancestry') / 'data' / DEFAULT_PANEL_RESOURCE
    with resource.open('r', encoding='utf-8') as f:
        df = pd.read_csv(f, dtype={'variant_id': str, 'chromosome': str})
    table = MarkerReferenceTable.from_dataframe(df)
    logger.info(f"Loaded {len(table)} markers from packaged panel")
    return table
