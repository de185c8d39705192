from market_api.analysis.services.error_hints import (
    UPSTREAM_ERROR_HINT,
    extract_retry_after_seconds,
    upstream_error_hint,
)

QUOTA_MESSAGE = (
    "You exceeded your current quota, please check your plan and billing details. "
    "Please retry in 42.218702404s."
)


def test_extracts_and_rounds_up():
    assert extract_retry_after_seconds(QUOTA_MESSAGE) == 43


def test_integer_and_minimum_one_second():
    assert extract_retry_after_seconds("please RETRY IN 7s") == 7
    assert extract_retry_after_seconds("Please retry in 0.2s.") == 1


def test_no_match():
    assert extract_retry_after_seconds("Model not found") is None
    assert extract_retry_after_seconds(None) is None


def test_hint_prefixes_wait_time():
    assert upstream_error_hint(QUOTA_MESSAGE).startswith("약 43초 후 다시 시도해주세요.")
    assert upstream_error_hint("boom") == UPSTREAM_ERROR_HINT
