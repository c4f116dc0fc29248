"""
Regions Module
Continental region codes and their human-readable labels.
"""

from enum import Enum
from typing import Dict


class Region(Enum):
    """
    Reference regions used by the marker panel.
    Declaration order is the tie-break order for normalization.
    """
    
    EUR = "EUR"
    EAS = "EAS"
    SAS = "SAS"
    AFR = "AFR"
    AMR = "AMR"
    
    @classmethod
    def from_code(cls, code: str) -> "Region":
        """
        Parse a region code case-insensitively.
        
        Args:
            code: Region code such as 'EUR' or 'eas'
            
        Returns:
            Matching Region member
        """
        try:
            return cls(code.strip().upper())
        except ValueError:
            raise ValueError(f"Unknown region code: {code!r}") from None


DEFAULT_LOCALE = "ru"

REGION_LABELS: Dict[str, Dict[Region, str]] = {
    "ru": {
        Region.EUR: "Европа",
        Region.EAS: "Восточная Азия",
        Region.SAS: "Южная Азия",
        Region.AFR: "Африка",
        Region.AMR: "Америка",
    },
    "en": {
        Region.EUR: "Europe",
        Region.EAS: "East Asia",
        Region.SAS: "South Asia",
        Region.AFR: "Africa",
        Region.AMR: "America",
    },
}


def region_label(region: Region, locale: str = DEFAULT_LOCALE) -> str:
    """Return the display label of a region in the given locale."""
    if locale not in REGION_LABELS:
        raise ValueError(f"Unsupported locale: {locale!r}")
    return REGION_LABELS[locale][region]
