"""Pytest configuration and fixtures for VCF ancestry tests."""

from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Tuple

import pytest

from vcf_ancestry.reference_data import MarkerRecord, MarkerReferenceTable
from vcf_ancestry.regions import Region

VCF_HEADER = (
    "##fileformat=VCFv4.2\n"
    "##source=TestCaller\n"
    "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\tFORMAT\tSAMPLE1\n"
)


def vcf_line(chrom: str, pos, variant_id: str, genotype: str,
             ref: str = "A", alt: str = "G", qual: str = "50") -> str:
    """One tab-separated data line with a GT:DP sample column."""
    return f"{chrom}\t{pos}\t{variant_id}\t{ref}\t{alt}\t{qual}\tPASS\t.\tGT:DP\t{genotype}:30"


def build_vcf(rows: Iterable[Tuple], header: bool = True) -> bytes:
    """
    Build VCF bytes from (chrom, pos, id, genotype) tuples.

    Extra tuple items are passed on to vcf_line as ref, alt and qual.
    """
    lines = [vcf_line(*row) for row in rows]
    text = (VCF_HEADER if header else "") + "\n".join(lines)
    if lines:
        text += "\n"
    return text.encode("utf-8")


@pytest.fixture
def make_vcf():
    return build_vcf


@pytest.fixture(scope="session")
def default_reference() -> MarkerReferenceTable:
    return MarkerReferenceTable.default()


def build_marker(variant_id: str, chromosome: str = "1", position: int = 1000,
                quality: float = 95.0, **frequencies: float) -> MarkerRecord:
    """MarkerRecord with frequencies given as region-code keyword arguments."""
    freqs = {Region.from_code(code): value for code, value in frequencies.items()}
    return MarkerRecord(
        variant_id=variant_id,
        chromosome=chromosome,
        position=position,
        population_frequencies=MappingProxyType(freqs),
        ancestry_informative=True,
        quality=quality,
    )


@pytest.fixture
def small_reference() -> MarkerReferenceTable:
    """Two-marker panel with one European-leaning and one African-leaning SNP."""
    return MarkerReferenceTable([
        build_marker("rs_eur", "1", 100, EUR=0.8, EAS=0.2, SAS=0.4, AFR=0.1, AMR=0.3),
        build_marker("rs_afr", "2", 200, EUR=0.1, EAS=0.05, SAS=0.1, AFR=0.9, AMR=0.2),
    ])


@pytest.fixture(scope="session")
def sample_vcf_path() -> Path:
    return Path(__file__).parent.parent / "examples" / "sample.vcf"


@pytest.fixture
def make_marker():
    return build_marker
