"""
Report Module
Human-readable report and score tables for an analysis result.
"""

from typing import Dict, Optional

import pandas as pd

from .aggregation import RegionScore
from .reference_data import MarkerStats
from .regions import Region
from .results import AnalysisResult, AnalysisStatus

SCORE_COLUMNS = ['region', 'markers', 'total_score', 'average_score',
                 'percentage', 'average_confidence']


def confidence_level(average_confidence: float) -> str:
    """Qualitative level of the mean marker quality."""
    if average_confidence >= 90:
        return "Very high"
    if average_confidence >= 80:
        return "High"
    if average_confidence >= 70:
        return "Medium"
    return "Low"


def coverage_level(coverage: float) -> str:
    """Qualitative level of the share of panel markers found in the file."""
    if coverage >= 80:
        return "Excellent"
    if coverage >= 60:
        return "Good"
    if coverage >= 40:
        return "Satisfactory"
    return "Low"


def scores_to_dataframe(scores: Dict[Region, RegionScore]) -> pd.DataFrame:
    """
    Tabulate per-region scores.

    Args:
        scores: Region scores of an autosomal analysis

    Returns:
        DataFrame with one row per region that received markers
    """
    rows = [
        {
            'region': region.value,
            'markers': score.marker_count,
            'total_score': score.total_score,
            'average_score': score.average_score,
            'percentage': score.percentage,
            'average_confidence': score.average_confidence,
        }
        for region, score in scores.items()
        if score.marker_count > 0
    ]
    return pd.DataFrame(rows, columns=SCORE_COLUMNS)


def generate_report(result: AnalysisResult, stats: Optional[MarkerStats] = None) -> str:
    """
    Generate a plain-text report of an analysis.

    Args:
        result: Analysis result
        stats: Optional statistics of the marker panel used

    Returns:
        Formatted report string
    """
    diagnostics = result.diagnostics
    report_lines = []
    report_lines.append("=" * 60)
    report_lines.append(f"ORIGIN ANALYSIS REPORT ({result.method})")
    report_lines.append("=" * 60)
    report_lines.append("")

    report_lines.append("NOTE: Estimates assume each marker is independent evidence.")
    report_lines.append("They are not a substitute for a population-genetics model.")
    report_lines.append("")

    if result.status is AnalysisStatus.FALLBACK:
        report_lines.append("⚠ Not enough data for an estimate; showing the default distribution.")
        if result.error:
            report_lines.append(f"  Reason: {result.error}")
        report_lines.append("")

    report_lines.append("ORIGINS:")
    report_lines.append("-" * 60)
    for portion in result.portions:
        report_lines.append(f"{portion.region:30s}: {portion.percent:3d}%")
    report_lines.append("")

    scores = diagnostics.get('region_scores')
    if scores:
        table = scores_to_dataframe(scores)
        if not table.empty:
            report_lines.append("REGION SCORES:")
            report_lines.append("-" * 60)
            for row in table.itertuples(index=False):
                report_lines.append(f"{row.region}:")
                report_lines.append(f"  Markers processed  : {row.markers:,}")
                report_lines.append(f"  Average score      : {row.average_score:.4f}")
                report_lines.append(f"  Percentage         : {row.percentage:.1f}%")
                report_lines.append(f"  Total score        : {row.total_score:.2f}")
                report_lines.append(
                    f"  Average confidence : {row.average_confidence:.1f} "
                    f"({confidence_level(row.average_confidence)})"
                )
            report_lines.append("")

    if 'panel_coverage' in diagnostics:
        coverage = diagnostics['panel_coverage']
        report_lines.append("ANALYSIS QUALITY:")
        report_lines.append("-" * 60)
        report_lines.append(f"Variants parsed      : {diagnostics.get('parsed_variants', 0):,}")
        report_lines.append(f"Autosomal variants   : {diagnostics.get('autosomal_variants', 0):,}")
        report_lines.append(f"Panel markers found  : {diagnostics.get('matched_markers', 0):,}")
        report_lines.append(f"Panel coverage       : {coverage:.1f}% ({coverage_level(coverage)})")
        report_lines.append("")

    if 'haplogroup' in diagnostics:
        report_lines.append("HAPLOGROUP CALL:")
        report_lines.append("-" * 60)
        report_lines.append(f"Variants on chromosome : {diagnostics.get('chromosome_variants', 0):,}")
        report_lines.append(f"Known markers found    : {diagnostics.get('matched_markers', 0):,}")
        report_lines.append(f"Confidence             : {diagnostics.get('confidence', 0.0):.2f} (0-1 scale)")
        report_lines.append("")

    if stats is not None:
        report_lines.append("MARKER PANEL:")
        report_lines.append("-" * 60)
        report_lines.append(f"Total markers              : {stats.total_markers:,}")
        report_lines.append(f"Loaded markers             : {stats.loaded_markers:,}")
        report_lines.append(f"Ancestry-informative       : {stats.ancestry_informative_markers:,}")
        report_lines.append(f"Average quality            : {stats.average_quality:.1f}")
        report_lines.append(f"Cache size                 : {stats.cache_size:,}")
        report_lines.append("")

    if 'panel_coverage' in diagnostics:
        coverage = diagnostics['panel_coverage']
        report_lines.append("RECOMMENDATIONS:")
        report_lines.append("-" * 60)
        if coverage >= 80:
            report_lines.append("✓ Analysis used most of the marker panel")
        elif coverage >= 60:
            report_lines.append("⚠ Consider a file covering more panel markers")
        else:
            report_lines.append("⚠ The file contains too few panel markers for a reliable estimate")
        report_lines.append("")

    report_lines.append("=" * 60)

    return "\n".join(report_lines)
