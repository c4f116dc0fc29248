"""
Visualization Module
Bar chart of an origin distribution.
"""

import logging
from pathlib import Path
from typing import List, Union

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt  # noqa: E402

from .results import OriginPortion

logger = logging.getLogger(__name__)

BAR_COLOR = '#1f77b4'


def plot_origins(portions: List[OriginPortion], output_file: Union[str, Path],
                 title: str = 'Origin distribution') -> Path:
    """
    Save a horizontal bar chart of the portions.

    Args:
        portions: Distribution to plot, largest first
        output_file: Image path; the format follows the extension
        title: Chart title

    Returns:
        Path of the written image
    """
    if not portions:
        raise ValueError("Nothing to plot: empty distribution")

    output_file = Path(output_file)
    labels = [p.region for p in portions][::-1]
    values = [p.percent for p in portions][::-1]

    fig, ax = plt.subplots(figsize=(8, max(2.5, 0.6 * len(portions) + 1)))
    bars = ax.barh(labels, values, color=BAR_COLOR, edgecolor='black', alpha=0.85)

    for bar, value in zip(bars, values):
        ax.text(bar.get_width() + 1, bar.get_y() + bar.get_height() / 2,
                f'{value}%', va='center', fontsize=10)

    ax.set_xlim(0, 110)
    ax.set_xlabel('Percent', fontsize=11)
    ax.set_title(title, fontsize=13, fontweight='bold')
    ax.grid(True, axis='x', alpha=0.3)

    fig.tight_layout()
    fig.savefig(output_file, dpi=150, bbox_inches='tight')
    plt.close(fig)

    logger.info(f"Chart saved to: {output_file}")
    return output_file
