"""
Autosomal Analysis Module
Estimates regional origin from autosomal panel markers in a VCF file.
"""

import logging
from typing import Any, Dict, Optional

from .aggregation import AncestryAggregator
from .config import AnalysisConfig
from .exceptions import VCFDecodeError
from .fallback import primary_fallback
from .filters import FilterStats, filter_autosomal, match_markers
from .reference_data import MarkerReferenceTable
from .results import AnalysisResult, AnalysisStatus
from .vcf_parser import VCFParser, decode_vcf_bytes

logger = logging.getLogger(__name__)

METHOD_ID = 'autosomal_analysis'
EXAMPLE_MARKERS = 5


class AutosomalAnalyzer:
    """
    Runs the autosomal pipeline: parse, filter to chromosomes 1-22, match
    against the marker panel, score genotypes and normalize.
    """

    def __init__(self, reference: Optional[MarkerReferenceTable] = None,
                 config: Optional[AnalysisConfig] = None):
        """
        Initialize the analyzer.

        Args:
            reference: Marker panel; the packaged panel is loaded when omitted
            config: Analysis parameters
        """
        self.config = config or AnalysisConfig()
        if reference is None:
            reference = (MarkerReferenceTable.from_csv(self.config.panel_path)
                         if self.config.panel_path else MarkerReferenceTable.default())
        self.reference = reference

    def analyze(self, data: bytes) -> AnalysisResult:
        """
        Analyze a raw VCF buffer.

        Args:
            data: Raw file contents, plain or gzip-compressed

        Returns:
            AnalysisResult with status SUCCESS, or FALLBACK carrying the
            documented fallback distribution when nothing could be scored
        """
        logger.info(f"Starting autosomal analysis ({len(data):,} bytes)")

        try:
            text = decode_vcf_bytes(data)
        except VCFDecodeError as e:
            logger.error(f"Autosomal analysis failed: {e}")
            return self._fallback({'input_bytes': len(data)}, error=str(e))

        parser = VCFParser(default_quality=self.config.default_quality,
                           progress_interval=self.config.progress_interval)
        autosomal_stats = FilterStats()
        match_stats = FilterStats()
        aggregator = AncestryAggregator(low_signal_cutoff=self.config.low_signal_cutoff)

        records = filter_autosomal(parser.iter_text(text), autosomal_stats)
        for record, marker in match_markers(records, self.reference, match_stats):
            if match_stats.passed <= EXAMPLE_MARKERS:
                logger.debug(
                    f"Matched marker {record.variant_id} "
                    f"(chr {record.chromosome}, genotype {record.genotype})"
                )
            aggregator.add_marker(record.genotype, marker)

        diagnostics = self._diagnostics(data, parser, autosomal_stats, aggregator)
        logger.info(
            f"Autosomal SNPs: {autosomal_stats.passed:,} of {autosomal_stats.seen:,}; "
            f"panel markers matched: {aggregator.marker_count:,}"
        )

        if aggregator.marker_count == 0:
            logger.warning("No panel markers found in the VCF file, using fallback distribution")
            return self._fallback(diagnostics)

        portions = aggregator.normalize(self.config.locale)
        if not portions:
            logger.warning("All regions fell below the signal cutoff, using fallback distribution")
            return self._fallback(diagnostics)

        return AnalysisResult(
            portions=portions,
            status=AnalysisStatus.SUCCESS,
            method=METHOD_ID,
            diagnostics=diagnostics,
        )

    def _fallback(self, diagnostics: Dict[str, Any], error: Optional[str] = None) -> AnalysisResult:
        return AnalysisResult(
            portions=primary_fallback(self.config.locale),
            status=AnalysisStatus.FALLBACK,
            method=METHOD_ID,
            diagnostics=diagnostics,
            error=error,
        )

    def _diagnostics(self, data: bytes, parser: VCFParser, autosomal_stats: FilterStats,
                     aggregator: AncestryAggregator) -> Dict[str, Any]:
        """Collect counts and per-region scores for reporting."""
        panel_size = len(self.reference)
        matched = aggregator.marker_count

        return {
            'input_bytes': len(data),
            'data_lines': parser.line_count,
            'skipped_lines': parser.skipped_lines,
            'parsed_variants': autosomal_stats.seen,
            'autosomal_variants': autosomal_stats.passed,
            'matched_markers': matched,
            'panel_markers': panel_size,
            'panel_coverage': min(matched / panel_size * 100.0, 100.0) if panel_size else 0.0,
            'region_scores': dict(aggregator.scores),
            'sample_names': list(parser.sample_names),
        }
