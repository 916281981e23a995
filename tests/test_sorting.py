from types import SimpleNamespace

from services.sorting_service import nested_value, next_direction, sort_indicator, sort_records

ROWS = [
    {"id": "a", "qty": 3, "name": "beta", "createdAt": "2024-03-01", "project": {"name": "Press"}},
    {"id": "b", "qty": None, "name": None, "createdAt": None, "project": None},
    {"id": "c", "qty": 1, "name": "Alpha", "createdAt": "2023-12-31", "project": {"name": "Die"}},
]


def _ids(rows):
    return [r["id"] for r in rows]


def test_numbers_with_missing_values():
    assert _ids(sort_records(ROWS, "qty", "asc")) == ["c", "a", "b"]
    assert _ids(sort_records(ROWS, "qty", "desc")) == ["b", "a", "c"]


def test_strings_compare_case_insensitively():
    assert _ids(sort_records(ROWS, "name", "asc")) == ["c", "a", "b"]


def test_date_strings_compare_chronologically():
    assert _ids(sort_records(ROWS, "createdAt", "asc")) == ["c", "a", "b"]


def test_nested_keys():
    assert _ids(sort_records(ROWS, "project.name", "asc")) == ["c", "a", "b"]
    assert nested_value(SimpleNamespace(project=SimpleNamespace(name="Die")), "project.name") == "Die"
    assert nested_value({"project": None}, "project.name") is None


def test_no_direction_keeps_input_order():
    out = sort_records(ROWS, "qty", None)
    assert _ids(out) == ["a", "b", "c"]
    assert out is not ROWS


def test_header_click_cycle():
    assert next_direction(None, None, "qty") == "asc"
    assert next_direction("qty", "asc", "qty") == "desc"
    assert next_direction("qty", "desc", "qty") is None
    assert next_direction("name", "desc", "qty") == "asc"
    assert sort_indicator("qty", "asc", "qty") == "↑"
    assert sort_indicator("qty", "desc", "qty") == "↓"
    assert sort_indicator("name", "asc", "qty") is None


def test_out_of_range_dates_sort_as_plain_strings():
    rows = [{"id": "a", "at": "9999-12-31T23:00:00-05:00"}, {"id": "b", "at": "2024-01-01"}]
    assert _ids(sort_records(rows, "at", "asc")) == ["b", "a"]
