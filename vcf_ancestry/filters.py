"""
Filters Module
Restricts parsed variants to well-formed autosomal calls and to panel markers.
"""

import re
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Tuple

from .reference_data import MarkerRecord, MarkerReferenceTable
from .vcf_parser import VariantRecord

AUTOSOME_PATTERN = re.compile(r'^(?:[1-9]|1[0-9]|2[0-2])$')
NO_CALL_GENOTYPES = ('', '.', './.')


@dataclass
class FilterStats:
    """Counts of records entering and leaving a filter stage."""
    
    seen: int = 0
    passed: int = 0
    
    @property
    def rejected(self) -> int:
        return self.seen - self.passed


def is_autosomal_chromosome(chromosome: str) -> bool:
    """True only for the bare labels '1' to '22' ('chr1', '23', 'X' do not match)."""
    return AUTOSOME_PATTERN.match(chromosome) is not None


def is_autosomal_call(record: VariantRecord) -> bool:
    """Check whether a record is an autosomal, called, well-formed variant."""
    return (
        is_autosomal_chromosome(record.chromosome)
        and bool(record.variant_id)
        and record.genotype not in NO_CALL_GENOTYPES
        and bool(record.reference_allele)
        and bool(record.alternate_allele)
        and record.quality >= 0.0
    )


def filter_autosomal(records: Iterable[VariantRecord],
                     stats: Optional[FilterStats] = None) -> Iterator[VariantRecord]:
    """
    Keep autosomal (chromosomes 1-22) calls with usable alleles and genotype.
    
    Args:
        records: Parsed variant records
        stats: Optional counter updated as records stream through
        
    Yields:
        Records passing the filter, in input order
    """
    for record in records:
        if stats is not None:
            stats.seen += 1
        if is_autosomal_call(record):
            if stats is not None:
                stats.passed += 1
            yield record


def match_markers(records: Iterable[VariantRecord],
                  reference: MarkerReferenceTable,
                  stats: Optional[FilterStats] = None) -> Iterator[Tuple[VariantRecord, MarkerRecord]]:
    """
    Pair records with their panel marker, dropping records not on the panel.
    
    Args:
        records: Filtered variant records
        reference: Marker reference table
        stats: Optional counter updated as records stream through
        
    Yields:
        (record, marker) pairs, in input order
    """
    for record in records:
        if stats is not None:
            stats.seen += 1
        marker = reference.lookup(record.variant_id)
        if marker is not None:
            if stats is not None:
                stats.passed += 1
            yield record, marker
