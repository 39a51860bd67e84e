import math

import matplotlib

matplotlib.use('Agg')

from dcfcalc.analysis.football_field import drawable_bands
from dcfcalc.analysis.football_field import plot_football_field
from dcfcalc.domain.types import ValuationBand

BANDS = [
    ValuationBand(method='DCF', low=90.0, high=160.0, point=123.96),
    ValuationBand(method='EV/EBITDA', low=250.0, high=330.0, point=291.97),
    ValuationBand(method='P/E', low=math.nan, high=math.nan, point=math.nan),
]


class TestFootballField:
  """Tests for the football-field chart."""

  def test_drawable(self):
    assert [b.method for b in drawable_bands(BANDS)] == ['DCF', 'EV/EBITDA']

  def test_plot_saves_image(self, tmp_path):
    out = plot_football_field(BANDS,
                              tmp_path / 'charts' / 'ff.png',
                              title='DEMO',
                              current_price=120.0)

    assert out == tmp_path / 'charts' / 'ff.png'
    assert out.exists()
    assert out.stat().st_size > 0

  def test_nothing_to_plot(self, tmp_path):
    out = plot_football_field(BANDS[2:], tmp_path / 'ff.png')

    assert out is None
    assert not (tmp_path / 'ff.png').exists()
