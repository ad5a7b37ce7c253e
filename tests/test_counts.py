import pytest

from voicefeed.core.counts import coerce_count, normalize_counts


def test_normalize_counts_flattens_nested_aggregate_shape() -> None:
    raw = {"id": "a", "likes": [{"count": 5}], "comments": [{"count": 2}], "plays": 7}

    normalized = normalize_counts(raw)

    assert normalized["likes"] == 5
    assert normalized["comments"] == 2
    assert normalized["plays"] == 7
    assert normalized["shares"] == 0
    assert normalized["id"] == "a"


def test_normalize_counts_defaults_missing_fields_to_zero() -> None:
    assert normalize_counts({}) == {"likes": 0, "comments": 0, "plays": 0, "shares": 0}


def test_normalize_counts_is_idempotent() -> None:
    raw = {"likes": [{"count": 3}], "comments": None, "plays": "12", "shares": [{"count": 1}, {"count": 2}]}

    once = normalize_counts(raw)

    assert normalize_counts(once) == once
    assert once["shares"] == 0


def test_normalize_counts_does_not_mutate_input() -> None:
    raw = {"likes": [{"count": 3}]}

    normalize_counts(raw)

    assert raw == {"likes": [{"count": 3}]}


@pytest.mark.parametrize(
    "value",
    [None, [], [{}], [{"count": None}], {"total": 3}, "abc", -4, True, object()],
)
def test_coerce_count_falls_back_to_zero_for_malformed_values(value) -> None:
    assert coerce_count(value) == 0


def test_coerce_count_accepts_mapping_and_string_forms() -> None:
    assert coerce_count({"count": 9}) == 9
    assert coerce_count(" 4 ") == 4
    assert coerce_count(2.9) == 2
