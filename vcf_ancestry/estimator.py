"""
Estimator Module
Chooses the analyzer for a decoding method and guards the output contract.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from .autosomal import METHOD_ID as AUTOSOMAL_METHOD, AutosomalAnalyzer
from .config import AnalysisConfig
from .fallback import input_seed, seeded_fallback
from .haplogroup import (
    UNDETERMINED_HAPLOGROUP,
    MtHaplogroupAnalyzer,
    YHaplogroupAnalyzer,
)
from .reference_data import MarkerReferenceTable
from .results import AnalysisResult, AnalysisStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecodingMethod:
    """A user-selectable analysis method."""

    id: str
    name: str
    description: str


DECODING_METHODS: List[DecodingMethod] = [
    DecodingMethod(
        id=AUTOSOMAL_METHOD,
        name="Аутосомный анализ",
        description="Определение этнического происхождения по аутосомным хромосомам (1-22) "
                    "с использованием панели маркеров происхождения",
    ),
    DecodingMethod(
        id=YHaplogroupAnalyzer.method_id,
        name="Определение Y-гаплогруппы",
        description="Анализ Y-хромосомы для определения отцовской линии "
                    "и гаплогруппы предков по мужской линии",
    ),
    DecodingMethod(
        id=MtHaplogroupAnalyzer.method_id,
        name="Определение мт-гаплогруппы",
        description="Анализ митохондриальной ДНК для определения материнской линии "
                    "и гаплогруппы предков по женской линии",
    ),
]

HAPLOGROUP_ANALYZERS = {
    YHaplogroupAnalyzer.method_id: YHaplogroupAnalyzer,
    MtHaplogroupAnalyzer.method_id: MtHaplogroupAnalyzer,
}


def estimate_origins(data: bytes,
                     method: Optional[str] = None,
                     reference: Optional[MarkerReferenceTable] = None,
                     config: Optional[AnalysisConfig] = None) -> AnalysisResult:
    """
    Analyze a VCF buffer with the analyzer selected by ``method``.

    Unknown or missing methods run the autosomal analysis.

    Args:
        data: Raw VCF file contents
        method: Decoding method id
        reference: Marker panel for the autosomal analysis
        config: Analysis parameters

    Returns:
        AnalysisResult whose portions are never empty and sum to 100
    """
    config = config or AnalysisConfig()

    if method in HAPLOGROUP_ANALYZERS:
        analyzer = HAPLOGROUP_ANALYZERS[method](config=config)
    else:
        if method not in (None, AUTOSOMAL_METHOD):
            logger.warning(f"Unknown decoding method {method!r}, running autosomal analysis")
        analyzer = AutosomalAnalyzer(reference=reference, config=config)

    result = analyzer.analyze(data)

    if not result.portions or result.total_percent <= 0:
        logger.warning(f"{result.method} produced an empty distribution, using fallback")
        return AnalysisResult(
            portions=seeded_fallback(input_seed(data), config.locale),
            status=AnalysisStatus.FALLBACK,
            method=result.method,
            diagnostics=result.diagnostics,
            error=result.error,
        )

    return result


def extract_haplogroup(label: str) -> str:
    """
    Recover the haplogroup code from a haplogroup portion label.

    'Y-гаплогруппа: R1a (Европа)' -> 'R1a'. Labels without a code give
    the undetermined marker.
    """
    prefixes = (YHaplogroupAnalyzer.label_prefix, MtHaplogroupAnalyzer.label_prefix)
    for prefix in prefixes:
        head = f"{prefix}: "
        if label.startswith(head):
            return label[len(head):].split(" (", 1)[0].strip() or UNDETERMINED_HAPLOGROUP
    return UNDETERMINED_HAPLOGROUP


def build_summary(file_name: Optional[str], result: AnalysisResult, data: bytes) -> str:
    """
    One-line free-text summary stored next to a report.

    Args:
        file_name: Name of the uploaded file, if known
        result: Analysis result
        data: Raw VCF buffer that was analyzed

    Returns:
        Summary string
    """
    diagnostics = result.diagnostics
    analyzed = diagnostics.get('parsed_variants', diagnostics.get('chromosome_variants', 0))
    matched = diagnostics.get('matched_markers', 0)

    return (
        f"Файл: {file_name or 'unknown'}, метод: {result.method}, "
        f"проанализировано SNP: {analyzed}, найдено совпадений: {matched}, "
        f"размер файла: {len(data)} байт"
    )


def method_ids() -> List[str]:
    return [m.id for m in DECODING_METHODS]
