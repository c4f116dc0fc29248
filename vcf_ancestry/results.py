"""
Results Module
Output types shared by the autosomal and haplogroup analyzers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class OriginPortion:
    """One entry of an origin distribution: a region label and its share."""
    
    region: str
    percent: int
    
    def to_dict(self) -> Dict[str, Any]:
        return {'region': self.region, 'percent': self.percent}


class AnalysisStatus(Enum):
    """How an analysis arrived at its portions."""
    
    SUCCESS = "success"
    UNDETERMINED = "undetermined"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class AnalysisResult:
    """
    Outcome of one analysis call.
    
    The portions are always usable: a failed analysis carries a fallback
    distribution with status FALLBACK and the reason in ``error``.
    """
    
    portions: List[OriginPortion]
    status: AnalysisStatus
    method: str
    diagnostics: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    
    @property
    def is_fallback(self) -> bool:
        return self.status is AnalysisStatus.FALLBACK
    
    @property
    def total_percent(self) -> int:
        return sum(p.percent for p in self.portions)
    
    def to_dict(self) -> Dict[str, Any]:
        """Serialize the result to plain JSON-compatible types."""
        return {
            'method': self.method,
            'status': self.status.value,
            'origins': [p.to_dict() for p in self.portions],
            'error': self.error,
        }
