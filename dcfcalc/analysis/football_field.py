'''
Football-field chart of valuation ranges.

One horizontal bar per method from its low to high value per share, a
marker at the point estimate, and the market price as a vertical line.

Usage:
  python -m dcfcalc.run --ticker MSFT --variant ten_year --plot msft.png
'''

import logging
from math import isfinite
from pathlib import Path
from typing import List, Optional

import matplotlib.pyplot as plt

from dcfcalc.domain.types import ValuationBand

logger = logging.getLogger(__name__)


def drawable_bands(bands: List[ValuationBand]) -> List[ValuationBand]:
  '''Bands whose range is finite.'''
  return [b for b in bands if isfinite(b.low) and isfinite(b.high)]


def plot_football_field(
    bands: List[ValuationBand],
    output_path: Path,
    title: str = 'Valuation Range',
    current_price: Optional[float] = None,
    symbol: str = '$',
) -> Optional[Path]:
  '''
  Draw the football field and save it as an image.

  Args:
    bands: Valuation bands, drawn top to bottom in the given order
    output_path: Image path (format from the suffix)
    title: Chart title
    current_price: Market price line, skipped when None or not positive
    symbol: Currency symbol for the axis label

  Returns:
    The saved path, or None when no band has a finite range
  '''
  drawable = drawable_bands(bands)
  skipped = [b.method for b in bands if b not in drawable]
  if skipped:
    logger.warning('Skipping bands without a finite range: %s', skipped)
  if not drawable:
    logger.warning('Nothing to plot for %s', title)
    return None

  fig, ax = plt.subplots(figsize=(10, 1.2 + 0.9 * len(drawable)))
  positions = list(range(len(drawable)))[::-1]

  ax.barh(positions, [b.high - b.low for b in drawable],
          left=[b.low for b in drawable],
          height=0.5,
          color='steelblue',
          alpha=0.8)
  for y, band in zip(positions, drawable):
    if isfinite(band.point):
      ax.plot(band.point, y, 'D', color='navy', markersize=7)
    ax.text(band.high,
            y,
            f'  {symbol}{band.low:,.2f} - {symbol}{band.high:,.2f}',
            va='center',
            fontsize=9)

  if current_price is not None and current_price > 0:
    ax.axvline(current_price,
               color='red',
               linestyle='--',
               linewidth=2,
               label=f'Market Price ({symbol}{current_price:,.2f})')
    ax.legend(loc='best', fontsize=10, framealpha=0.9)

  ax.set_yticks(positions)
  ax.set_yticklabels([b.method for b in drawable])
  ax.set_xlabel(f'Value per Share ({symbol})', fontsize=12, fontweight='bold')
  ax.set_title(title, fontsize=14, fontweight='bold', pad=20)
  ax.grid(True, axis='x', alpha=0.3, linestyle='--')

  plt.tight_layout()

  output_path = Path(output_path)
  output_path.parent.mkdir(parents=True, exist_ok=True)
  fig.savefig(output_path, dpi=150, bbox_inches='tight')
  logger.info('Saved: %s', output_path)

  plt.close(fig)
  return output_path
