import pytest

from app.core.errors import ValidationError
from app.query.options import ListOptions, parse_positive_int


@pytest.mark.parametrize("raw, expected", [
    (None, 1), ("", 1), ("abc", 1), ("0", 1), ("-3", 1), ("2", 2), (" 7 ", 7), (5, 5),
])
def test_parse_positive_int_falls_back_to_default(raw, expected):
    assert parse_positive_int(raw, 1) == expected


def test_defaults():
    options = ListOptions.parse()
    assert options.page == 1
    assert options.limit == 10
    assert options.query is None
    assert options.sort_by is None
    assert options.sort_type is None
    assert options.user_id is None


def test_limit_is_capped():
    assert ListOptions.parse(limit="1000").limit == 100


def test_blank_query_is_dropped():
    assert ListOptions.parse(query="   ").query is None
    assert ListOptions.parse(query="  intro ").query == "intro"


def test_sort_type_is_case_insensitive():
    assert ListOptions.parse(sort_type="ASC").sort_type == "asc"


def test_invalid_sort_type_rejected():
    with pytest.raises(ValidationError, match="sortType"):
        ListOptions.parse(sort_type="sideways")


def test_malformed_user_id_rejected():
    with pytest.raises(ValidationError, match="Invalid user id"):
        ListOptions.parse(user_id="not-an-id")


def test_options_are_immutable():
    options = ListOptions.parse(page="2")
    with pytest.raises(Exception):
        options.page = 3
