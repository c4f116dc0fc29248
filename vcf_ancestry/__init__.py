"""
VCF Ancestry
Regional-origin and haplogroup estimation from single-sample VCF files.
"""

__version__ = "0.1.0"

from .autosomal import AutosomalAnalyzer
from .config import AnalysisConfig, load_config
from .estimator import DECODING_METHODS, build_summary, estimate_origins, extract_haplogroup
from .haplogroup import MtHaplogroupAnalyzer, YHaplogroupAnalyzer
from .reference_data import MarkerRecord, MarkerReferenceTable
from .regions import Region
from .results import AnalysisResult, AnalysisStatus, OriginPortion
from .vcf_parser import VariantRecord, VCFParser

__all__ = [
    'AnalysisConfig',
    'AnalysisResult',
    'AnalysisStatus',
    'AutosomalAnalyzer',
    'DECODING_METHODS',
    'MarkerRecord',
    'MarkerReferenceTable',
    'MtHaplogroupAnalyzer',
    'OriginPortion',
    'Region',
    'VariantRecord',
    'VCFParser',
    'YHaplogroupAnalyzer',
    'build_summary',
    'estimate_origins',
    'extract_haplogroup',
    'load_config',
]
