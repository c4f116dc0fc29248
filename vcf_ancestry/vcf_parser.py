"""
VCF Parser Module
Parses single-sample variant-call (VCF) files into typed variant records.
"""

import gzip
import io
import logging
import zlib
from dataclasses import asdict, dataclass
from typing import Dict, Iterator, List, Optional

import pandas as pd

from .exceptions import VCFDecodeError

logger = logging.getLogger(__name__)

GZIP_MAGIC = b'\x1f\x8b'
MISSING_QUALITY_VALUES = ('.', '', '0')
MISSING_GENOTYPE = '.'
MIN_COLUMNS = 10


@dataclass(frozen=True)
class VariantRecord:
    """One data line of a VCF file, reduced to the first sample's call."""

    chromosome: str
    position: int
    variant_id: str
    reference_allele: str
    alternate_allele: str
    quality: float
    genotype: str


def decode_vcf_bytes(data: bytes) -> str:
    """
    Decode a raw VCF buffer to text.

    Gzip-compressed buffers (including bgzip) are decompressed first.
    Bytes that are not valid UTF-8 are replaced with U+FFFD so that a
    stray byte in a header or INFO field does not discard the file.

    Args:
        data: Raw file contents

    Returns:
        Decoded text

    Raises:
        VCFDecodeError: If the buffer is not a valid gzip stream
    """
    if data[:2] == GZIP_MAGIC:
        try:
            data = gzip.decompress(data)
        except (OSError, EOFError, zlib.error) as e:
            raise VCFDecodeError(f"Corrupt gzip stream: {e}") from e

    try:
        text = data.decode('utf-8')
    except UnicodeDecodeError as e:
        logger.warning(f"VCF buffer is not valid UTF-8, replacing undecodable bytes: {e}")
        text = data.decode('utf-8', errors='replace')

    return text.lstrip('\ufeff')


def iter_lines(text: str) -> Iterator[str]:
    """Yield the lines of a text, split on '\\n' only, without line terminators."""
    for line in io.StringIO(text):
        yield line.rstrip('\r\n')


def parse_quality(value: str, default: float = 50.0) -> float:
    """Parse a QUAL field, substituting the default for missing or non-numeric values."""
    if value in MISSING_QUALITY_VALUES:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def extract_genotype(format_field: str, sample_field: str) -> str:
    """
    Read the GT value of a sample column.

    Args:
        format_field: Colon-delimited FORMAT column, e.g. 'GT:DP:GQ'
        sample_field: Colon-delimited sample column, e.g. '0/1:35:99'

    Returns:
        Genotype string, or '.' when GT is absent or the sample is too short
    """
    keys = format_field.split(':')
    if 'GT' not in keys:
        return MISSING_GENOTYPE

    values = sample_field.split(':')
    index = keys.index('GT')
    if index >= len(values):
        return MISSING_GENOTYPE
    return values[index]


def parse_vcf_line(line: str, default_quality: float = 50.0) -> Optional[VariantRecord]:
    """
    Parse one tab-separated data line.

    Returns:
        VariantRecord, or None for lines with too few columns or a bad position
    """
    columns = line.split('\t')
    if len(columns) < MIN_COLUMNS:
        return None

    # Plain ASCII digits only: no sign, whitespace or underscores
    pos_field = columns[1]
    if not (pos_field.isascii() and pos_field.isdigit()):
        return None

    return VariantRecord(
        chromosome=columns[0],
        position=int(pos_field),
        variant_id=columns[2],
        reference_allele=columns[3],
        alternate_allele=columns[4],
        quality=parse_quality(columns[5], default_quality),
        genotype=extract_genotype(columns[8], columns[9]),
    )


def parse_vcf_text(text: str, default_quality: float = 50.0) -> Iterator[VariantRecord]:
    """
    Lazily parse VCF text into records, in file order.

    Header, comment and empty lines are skipped, as are malformed data lines.

    Args:
        text: Decoded VCF contents
        default_quality: QUAL substituted for missing values

    Returns:
        Iterator of VariantRecord, one per well-formed data line
    """
    return VCFParser(default_quality=default_quality).iter_text(text)


class VCFParser:
    """
    Parser for single-sample VCF files.
    Keeps the header metadata and line counts of the last parsed buffer.
    """

    def __init__(self, default_quality: float = 50.0, progress_interval: int = 50000):
        """
        Initialize the parser.

        Args:
            default_quality: QUAL substituted for missing or sentinel values
            progress_interval: Data lines between progress log messages
        """
        self.default_quality = default_quality
        self.progress_interval = progress_interval
        self.records: List[VariantRecord] = []
        self.metadata: Dict[str, str] = {}
        self.sample_names: List[str] = []
        self.line_count = 0
        self.skipped_lines = 0

    def parse_bytes(self, data: bytes) -> List[VariantRecord]:
        """
        Parse a raw VCF buffer.

        Args:
            data: Raw file contents, plain or gzip-compressed

        Returns:
            List of parsed records in file order
        """
        return self.parse_text(decode_vcf_bytes(data))

    def parse_text(self, text: str) -> List[VariantRecord]:
        """Parse decoded VCF text and keep the records. See parse_bytes."""
        self.records = list(self.iter_text(text))
        return self.records

    def iter_text(self, text: str) -> Iterator[VariantRecord]:
        """
        Stream records out of decoded VCF text.

        Metadata and line counters are reset when iteration starts and are
        complete once the iterator is exhausted.
        """
        self.metadata = {}
        self.sample_names = []
        self.line_count = 0
        self.skipped_lines = 0
        parsed = 0

        for line in iter_lines(text):
            if not line:
                continue
            if line.startswith('##'):
                self._parse_metadata(line)
                continue
            if line.startswith('#'):
                self._parse_column_header(line)
                continue

            self.line_count += 1
            if self.line_count % self.progress_interval == 0:
                logger.debug(f"Parsed {self.line_count:,} lines...")

            record = parse_vcf_line(line, self.default_quality)
            if record is None:
                self.skipped_lines += 1
                continue
            parsed += 1
            yield record

        logger.info(
            f"Parsed {parsed:,} variants "
            f"({self.skipped_lines:,} malformed lines skipped)"
        )

    def _parse_metadata(self, line: str):
        """Extract key=value pairs from '##' header lines."""
        key_val = line[2:].split('=', 1)
        if len(key_val) == 2 and key_val[0]:
            # Structured lines (INFO, FORMAT, contig...) repeat; keep the first
            self.metadata.setdefault(key_val[0].strip(), key_val[1].strip())

    def _parse_column_header(self, line: str):
        columns = line.lstrip('#').split('\t')
        self.sample_names = columns[MIN_COLUMNS - 1:]

    def to_dataframe(self) -> pd.DataFrame:
        """
        Convert the records of the last parse_bytes/parse_text call to a DataFrame.

        Returns:
            DataFrame with one row per record and one column per record field
        """
        columns = list(VariantRecord.__dataclass_fields__)
        return pd.DataFrame([asdict(r) for r in self.records], columns=columns)
