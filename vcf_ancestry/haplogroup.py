"""
Haplogroup Analysis Module
Simplified Y-chromosome (paternal) and mitochondrial (maternal) haplogroup calls.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from .config import AnalysisConfig
from .exceptions import VCFDecodeError
from .fallback import input_seed, seeded_fallback
from .results import AnalysisResult, AnalysisStatus, OriginPortion
from .vcf_parser import decode_vcf_bytes, iter_lines

logger = logging.getLogger(__name__)

UNDETERMINED_HAPLOGROUP = "Неопределено"
UNKNOWN_POPULATION = "Неизвестно"

Y_MARKERS: Dict[str, str] = {
    # European
    "rs2032678": "R1a", "rs17250845": "R1b", "rs13447378": "I1",
    "rs17250846": "I2", "rs17250847": "E1b1b", "rs17250848": "J1",
    "rs17250849": "J2", "rs17250850": "G2a", "rs17250851": "N1c",
    # Asian
    "rs17250852": "C3", "rs17250853": "O1", "rs17250854": "O2",
    "rs17250855": "O3", "rs17250856": "Q1a", "rs17250857": "D1",
    # African
    "rs17250858": "A1", "rs17250859": "B2", "rs17250860": "E1a",
    # Shared
    "rs17250861": "R", "rs17250862": "I", "rs17250863": "J",
}

# Checked in order; the first matching prefix wins
Y_POPULATIONS: Tuple[Tuple[str, str], ...] = (
    ("R1", "Европа"),
    ("I", "Европа"),
    ("J", "Ближний Восток"),
    ("G", "Кавказ"),
    ("E", "Африка/Средиземноморье"),
    ("N", "Северная Европа/Сибирь"),
    ("C", "Центральная Азия"),
    ("O", "Восточная Азия"),
    ("Q", "Америка/Сибирь"),
    ("D", "Япония/Тибет"),
)

MT_MARKERS: Dict[str, str] = {
    # European
    "rs28358571": "H", "rs28358572": "U", "rs28358573": "K",
    "rs28358574": "T", "rs28358575": "J", "rs28358576": "I",
    "rs28358577": "W", "rs28358578": "X", "rs28358579": "V",
    # Asian
    "rs28358580": "A", "rs28358581": "B", "rs28358582": "C",
    "rs28358583": "D", "rs28358584": "F", "rs28358585": "G",
    "rs28358586": "M", "rs28358587": "N", "rs28358588": "Y",
    "rs28358589": "Z",
    # African
    "rs28358590": "L0", "rs28358591": "L1", "rs28358592": "L2",
    "rs28358593": "L3", "rs28358594": "L4", "rs28358595": "L5",
    "rs28358596": "L6",
    # Macro-haplogroups
    "rs28358597": "R", "rs28358598": "N", "rs28358599": "M",
}

MT_POPULATIONS: Tuple[Tuple[str, str], ...] = (
    ("H", "Европа"),
    ("U", "Европа/Западная Азия"),
    ("K", "Европа"),
    ("T", "Европа/Западная Азия"),
    ("J", "Европа/Западная Азия"),
    ("I", "Европа"),
    ("W", "Европа"),
    ("X", "Европа/Северная Америка"),
    ("V", "Северная Европа"),
    ("A", "Восточная Азия/Америка"),
    ("B", "Восточная Азия/Америка"),
    ("C", "Восточная Азия/Америка"),
    ("D", "Восточная Азия/Америка"),
    ("F", "Восточная Азия"),
    ("G", "Восточная Азия"),
    ("M", "Азия/Океания"),
    ("N", "Азия"),
    ("Y", "Азия"),
    ("Z", "Азия"),
    ("L", "Африка"),
)


@dataclass(frozen=True)
class HaplogroupCall:
    """A haplogroup assignment and the markers supporting it."""

    haplogroup: str
    population: str
    confidence: float
    markers: List[str] = field(default_factory=list)

    @property
    def determined(self) -> bool:
        return self.haplogroup != UNDETERMINED_HAPLOGROUP


class HaplogroupAnalyzer:
    """
    Base class for single-lineage haplogroup estimation.

    Subclasses provide the chromosome synonyms, the marker table, the
    population table and the labels of the result.
    """

    method_id = ''
    chromosome_name = ''
    chromosomes: FrozenSet[str] = frozenset()
    markers: Dict[str, str] = {}
    populations: Tuple[Tuple[str, str], ...] = ()
    label_prefix = ''
    undetermined_label = ''

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()

    @property
    def confidence_denominator(self) -> int:
        raise NotImplementedError

    def analyze(self, data: bytes) -> AnalysisResult:
        """
        Estimate the haplogroup of a raw VCF buffer.

        Args:
            data: Raw file contents, plain or gzip-compressed

        Returns:
            AnalysisResult with a single portion at 100 percent
        """
        logger.info(f"Starting {self.method_id} analysis ({len(data):,} bytes)")

        try:
            text = decode_vcf_bytes(data)
        except VCFDecodeError as e:
            logger.error(f"{self.method_id} analysis failed: {e}")
            return AnalysisResult(
                portions=seeded_fallback(input_seed(data), self.config.locale),
                status=AnalysisStatus.FALLBACK,
                method=self.method_id,
                diagnostics={'input_bytes': len(data)},
                error=str(e),
            )

        variant_ids = self.extract_variant_ids(text)
        call = self.determine(variant_ids)
        diagnostics = {
            'input_bytes': len(data),
            'chromosome_variants': len(variant_ids),
            'matched_markers': len(call.markers),
            'haplogroup': call.haplogroup,
            'confidence': call.confidence,
        }

        if not call.determined:
            return AnalysisResult(
                portions=[OriginPortion(self.undetermined_label, 100)],
                status=AnalysisStatus.UNDETERMINED,
                method=self.method_id,
                diagnostics=diagnostics,
            )

        logger.info(
            f"Haplogroup {call.haplogroup} ({call.population}) from "
            f"{len(call.markers)} markers, confidence {call.confidence:.2f}"
        )
        return AnalysisResult(
            portions=[OriginPortion(self.format_label(call), 100)],
            status=AnalysisStatus.SUCCESS,
            method=self.method_id,
            diagnostics=diagnostics,
        )

    def extract_variant_ids(self, text: str) -> List[str]:
        """
        Collect the ID column of rows on this analyzer's chromosome.

        Args:
            text: Decoded VCF contents

        Returns:
            Variant identifiers in file order
        """
        variant_ids = []
        for line in iter_lines(text):
            if not line or line.startswith('#'):
                continue
            columns = line.split('\t')
            if columns[0] in self.chromosomes and len(columns) > 2:
                variant_ids.append(columns[2])

        logger.info(f"Found {len(variant_ids):,} variants on chromosome {self.chromosome_name}")
        return variant_ids

    def determine(self, variant_ids: Iterable[str]) -> HaplogroupCall:
        """
        Pick the haplogroup supported by the most known markers.

        Ties go to the haplogroup whose first supporting marker appears
        earliest in ``variant_ids``.

        Args:
            variant_ids: Identifiers found on the chromosome

        Returns:
            HaplogroupCall; UNDETERMINED_HAPLOGROUP when no marker is known
        """
        found = [vid for vid in variant_ids if vid in self.markers]
        if not found:
            logger.info(f"No known {self.method_id} markers found")
            return HaplogroupCall(
                haplogroup=UNDETERMINED_HAPLOGROUP,
                population=UNKNOWN_POPULATION,
                confidence=0.0,
            )

        # Counter keeps first-seen order, and most_common is stable on ties
        counts = Counter(self.markers[vid] for vid in found)
        haplogroup = counts.most_common(1)[0][0]

        return HaplogroupCall(
            haplogroup=haplogroup,
            population=self.population_for(haplogroup),
            confidence=min(1.0, len(found) / self.confidence_denominator),
            markers=found,
        )

    def population_for(self, haplogroup: str) -> str:
        """Population label of a haplogroup by prefix."""
        for prefix, population in self.populations:
            if haplogroup.startswith(prefix):
                return population
        return UNKNOWN_POPULATION

    def format_label(self, call: HaplogroupCall) -> str:
        return f"{self.label_prefix}: {call.haplogroup} ({call.population})"


class YHaplogroupAnalyzer(HaplogroupAnalyzer):
    """Paternal lineage from Y-chromosome markers."""

    method_id = 'y_haplogroup'
    chromosome_name = 'Y'
    chromosomes = frozenset({"Y", "chrY", "25"})
    markers = Y_MARKERS
    populations = Y_POPULATIONS
    label_prefix = "Y-гаплогруппа"
    undetermined_label = "Y-гаплогруппа не определена"

    @property
    def confidence_denominator(self) -> int:
        return self.config.y_confidence_denominator


class MtHaplogroupAnalyzer(HaplogroupAnalyzer):
    """Maternal lineage from mitochondrial markers."""

    method_id = 'mt_haplogroup'
    chromosome_name = 'MT'
    chromosomes = frozenset({"MT", "chrM", "26"})
    markers = MT_MARKERS
    populations = MT_POPULATIONS
    label_prefix = "мт-гаплогруппа"
    undetermined_label = "мт-гаплогруппа не определена"

    @property
    def confidence_denominator(self) -> int:
        return self.config.mt_confidence_denominator
