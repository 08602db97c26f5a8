"""
Unit tests for category resolution and taxonomy loading.
"""
import json

import pytest

from core.categories import CategoryMatch, resolve_category
from core.exceptions import TaxonomyError
from core.taxonomy import (
    DEFAULT_TAXONOMY,
    flatten_subcategories,
    get_taxonomy,
    load_taxonomy,
)


def test_resolve_known_subcategory():
    """Test subcategory names found in the description."""
    assert resolve_category("Starbucks Coffee", DEFAULT_TAXONOMY) == CategoryMatch("Wants", "Personal", "Coffee")
    assert resolve_category("Weekly GROCERIES run", DEFAULT_TAXONOMY) == CategoryMatch("Needs", "Household", "Groceries")
    assert resolve_category("Netflix subscription", DEFAULT_TAXONOMY) == CategoryMatch("Wants", "Leisure", "Subscription")


def test_resolve_unknown_is_uncategorized():
    """Test the default when nothing matches."""
    assert resolve_category("Zomato order", DEFAULT_TAXONOMY) == CategoryMatch("Uncategorized", "General", "General")
    assert resolve_category("", DEFAULT_TAXONOMY) == CategoryMatch("Uncategorized", "General", "General")


def test_resolve_bill_payment_short_circuit():
    """Test credit card bill payments skip the taxonomy scan."""
    match = resolve_category("Credit card payment - thank you", DEFAULT_TAXONOMY)
    assert match == CategoryMatch("Uncategorized", "Internal", "Bill Payment")


def test_resolve_first_match_in_taxonomy_order():
    """Test the taxonomy iteration order decides overlapping names."""
    wants_first = {
        "Wants": {"Lifestyle": ["Dining"]},
        "Avoids": {"Low Value": ["Unwanted Dining"]},
    }
    avoids_first = {
        "Avoids": {"Low Value": ["Unwanted Dining"]},
        "Wants": {"Lifestyle": ["Dining"]},
    }
    text = "Unwanted dining at cafe"
    assert resolve_category(text, wants_first) == CategoryMatch("Wants", "Lifestyle", "Dining")
    assert resolve_category(text, avoids_first) == CategoryMatch("Avoids", "Low Value", "Unwanted Dining")

    # Wants/Shopping precedes Avoids/Excessive Shopping in the default taxonomy
    assert resolve_category("Excessive shopping spree", DEFAULT_TAXONOMY).bucket == "Wants"


def test_taxonomy_not_mutated():
    """Test resolution leaves the taxonomy untouched."""
    taxonomy = {"Needs": {"Logistics": ["Fuel", "Parking"]}}
    snapshot = json.dumps(taxonomy)
    resolve_category("Fuel station", taxonomy)
    assert json.dumps(taxonomy) == snapshot


def test_flatten_subcategories():
    """Test flattening keeps category and subcategory order."""
    pairs = flatten_subcategories(DEFAULT_TAXONOMY, "Uncategorized")
    assert pairs == [
        ("General", "General"),
        ("General", "Correction"),
        ("Internal", "Transfer"),
        ("Internal", "Bill Payment"),
    ]
    assert flatten_subcategories(DEFAULT_TAXONOMY, "Missing") == []


def test_load_taxonomy(tmp_path):
    """Test loading a taxonomy file preserves order."""
    path = tmp_path / "taxonomy.json"
    path.write_text(json.dumps({
        "Wants": {"Fun": ["Cinema", "Games"]},
        "Needs": {"Home": ["Rent"]},
    }), encoding="utf-8")

    taxonomy = load_taxonomy(str(path))
    assert list(taxonomy) == ["Wants", "Needs"]
    assert taxonomy["Wants"]["Fun"] == ["Cinema", "Games"]


def test_load_taxonomy_invalid_bucket(tmp_path):
    """Test unknown bucket names are rejected."""
    path = tmp_path / "taxonomy.json"
    path.write_text(json.dumps({"Luxuries": {"Fun": ["Yacht"]}}), encoding="utf-8")

    with pytest.raises(TaxonomyError):
        load_taxonomy(str(path))


def test_load_taxonomy_missing_or_malformed(tmp_path):
    """Test missing files and bad JSON raise TaxonomyError."""
    with pytest.raises(TaxonomyError) as exc_info:
        load_taxonomy(str(tmp_path / "nope.json"))
    assert "taxonomy_path" in exc_info.value.details

    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(TaxonomyError):
        load_taxonomy(str(bad))


def test_get_taxonomy_default_and_configured(tmp_path, monkeypatch):
    """Test the configured taxonomy file replaces the default."""
    assert get_taxonomy() is DEFAULT_TAXONOMY

    from core.config import reset_settings
    from core.taxonomy import reset_taxonomy

    path = tmp_path / "taxonomy.json"
    path.write_text(json.dumps({"Needs": {"Home": ["Rent"]}}), encoding="utf-8")
    monkeypatch.setenv("TAXONOMY_PATH", str(path))
    reset_settings()
    reset_taxonomy()

    assert get_taxonomy() == {"Needs": {"Home": ["Rent"]}}
