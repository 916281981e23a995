from datetime import datetime
from unittest.mock import MagicMock, patch

from use_cases.domain_models import DateFilter
from views import date_filter_view

NOW = datetime(2026, 3, 1)


def test_year_range_follows_current_year():
    assert date_filter_view.year_range("2026", now=NOW) == (2026, 2016, 2031)
    assert date_filter_view.year_range(None, now=NOW) == (2026, 2016, 2031)
    assert date_filter_view.year_range("soon", now=NOW) == (2026, 2016, 2031)


def test_year_range_keeps_stored_year_outside_default_bounds():
    assert date_filter_view.year_range("2005", now=NOW) == (2005, 2005, 2031)
    assert date_filter_view.year_range("2040", now=NOW) == (2040, 2016, 2040)


@patch("views.date_filter_view.st")
def test_render_year_filter_does_not_rewrite_stored_year(mock_st):
    mock_st.columns.return_value = (MagicMock(), MagicMock())
    mock_st.selectbox.return_value = "year"
    mock_st.number_input.side_effect = lambda *args, **kwargs: kwargs["value"]

    result = date_filter_view.render_date_filter(DateFilter(type="year", year="2018"))

    assert result.year == "2018"
    kwargs = mock_st.number_input.call_args.kwargs
    assert kwargs["min_value"] <= 2018 <= kwargs["max_value"]
