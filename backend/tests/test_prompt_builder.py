import json

import pytest

from market_api.analysis.services.countries import CountryBucket, country_bucket
from market_api.analysis.services.prompt_builder import (
    build_primary_prompt,
    build_repair_prompt,
    expected_local_language,
)


@pytest.mark.parametrize("country", ["China", "china", "CHINA (mainland)", "중국", "중국 본토"])
def test_expected_language_china(country):
    assert expected_local_language(country) == "Simplified Chinese"


@pytest.mark.parametrize("country", ["Vietnam", "VIETNAM", "베트남", "남부 베트남"])
def test_expected_language_vietnam(country):
    assert expected_local_language(country) == "Vietnamese"


@pytest.mark.parametrize("country", ["미국", "Japan", "", None])
def test_expected_language_generic(country):
    assert expected_local_language(country) == "Local language"


def test_country_bucket_prefers_first_match():
    assert country_bucket("China / Vietnam") is CountryBucket.CHINA
    assert country_bucket("Thailand") is CountryBucket.OTHER


def test_primary_prompt_mentions_product_country_and_language():
    prompt = build_primary_prompt("등산화", "중국")

    assert '"등산화"' in prompt
    assert '"중국"' in prompt
    assert "exactly 6 items" in prompt
    assert "local MUST be Simplified Chinese" in prompt
    assert "platforms: up to 10 items" in prompt
    assert "No markdown" in prompt


def test_primary_prompt_is_deterministic():
    assert build_primary_prompt("샴푸", "Vietnam") == build_primary_prompt("샴푸", "Vietnam")


def test_repair_prompt_embeds_previous_keywords_unescaped():
    previous = ["등산화", "트레킹화 (hiking)"]
    prompt = build_repair_prompt(previous, "베트남")

    assert prompt.endswith(json.dumps(previous, ensure_ascii=False))
    assert "local language must be Vietnamese" in prompt
    assert "keep the same meaning" in prompt
