import dataclasses
import logging

import pytest

from tkosubs.registry import ProviderRegistry, parse_record


def test_loads_file_in_source_order(tmp_path):
    path = tmp_path / "providers.csv"
    path.write_text(
        "github,github\\.io,There isn't a GitHub Pages site here,true\n"
        "shopify,myshopify\\.com,\"Sorry, this shop is currently unavailable\",false\n"
        "heroku,herokuapp\\.com,no-such-app,TRUE\n"
    )

    registry = ProviderRegistry.from_file(str(path))

    assert registry.names == ["github", "shopify", "heroku"]
    assert registry[0].use_http is True
    assert registry[1].use_http is False
    assert registry[1].matches_body("<p>Sorry, this shop is currently unavailable.</p>")
    assert registry[2].scheme == "http"


def test_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        ProviderRegistry.from_file(str(tmp_path / "missing.csv"))


def test_invalid_pattern_is_skipped_with_warning(caplog):
    rows = [
        ["broken", "github(\\.io", "whatever", "true"],
        ["github", "github\\.io", "There isn't a GitHub Pages site here", "true"],
    ]

    with caplog.at_level(logging.WARNING):
        registry = ProviderRegistry.from_rows(rows)

    assert registry.names == ["github"]
    assert "invalid pattern" in caplog.text


def test_wrong_field_count_and_blank_rows_are_skipped(caplog):
    rows = [
        [],
        ["", "  "],
        ["github", "github\\.io", "no site"],
        ["heroku", "herokuapp\\.com", "no-such-app", "true"],
    ]

    with caplog.at_level(logging.WARNING):
        registry = ProviderRegistry.from_rows(rows)

    assert registry.names == ["heroku"]
    assert "expected 4 fields" in caplog.text


def test_provider_names_are_normalised():
    record = parse_record([" GitHub ", "github\\.io", "x", "false"])
    assert record.name == "github"


def test_only_literal_true_selects_http():
    assert parse_record(["a", "a", "a", "yes"]).use_http is False
    assert parse_record(["a", "a", "a", " True "]).use_http is True


def test_records_are_immutable(registry):
    with pytest.raises(dataclasses.FrozenInstanceError):
        registry[0].name = "other"
