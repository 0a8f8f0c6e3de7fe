"""
Unit tests for FieldCatalog construction and override merging.
"""

import pytest

from xml_to_csv.models import (BOUNDARY_SENTINEL, DEFAULT_BOUNDARY_ELEMENT,
                               DEFAULT_FIELD_MAPPINGS, FieldCatalog)


def test_default_catalog_column_order():
    catalog = FieldCatalog.default()

    assert catalog.column_order[:2] == ("Номер", "Название")
    assert catalog.column_order[-1] == "Инвойс"
    assert len(catalog.column_order) == len(DEFAULT_FIELD_MAPPINGS)
    assert catalog.boundary_element == DEFAULT_BOUNDARY_ELEMENT


def test_field_mappings_exclude_boundary_entry():
    catalog = FieldCatalog.default()
    sources = [source for source, _ in catalog.field_mappings()]

    assert BOUNDARY_SENTINEL not in sources
    assert ("GoodsNumeric", "Номер") in catalog.field_mappings()


def test_override_appends_new_column_at_end():
    catalog = FieldCatalog.from_overrides([("ExtraTag", "ExtraCol")])

    assert catalog.column_order[-1] == "ExtraCol"
    assert catalog.source_to_column["ExtraTag"] == "ExtraCol"


def test_override_to_existing_column_keeps_order():
    default = FieldCatalog.default()
    catalog = FieldCatalog.from_overrides([("Description", "Название")])

    assert catalog.column_order == default.column_order
    assert catalog.source_to_column["Description"] == "Название"
    # the built-in tag still feeds the same column
    assert catalog.source_to_column["GoodsDescription"] == "Название"


def test_override_preserves_first_seen_order_without_duplicates():
    catalog = FieldCatalog.from_overrides([
        ("A", "ColA"),
        ("B", "ColB"),
        ("C", "ColA"),
    ])

    assert catalog.column_order[-2:] == ("ColA", "ColB")
    assert len(set(catalog.column_order)) == len(catalog.column_order)


def test_boundary_override_changes_boundary_without_adding_column():
    default = FieldCatalog.default()
    catalog = FieldCatalog.from_overrides([(BOUNDARY_SENTINEL, "Item")])

    assert catalog.boundary_element == "Item"
    assert catalog.column_order == default.column_order


def test_from_overrides_with_base_catalog():
    base = FieldCatalog.from_overrides([("X", "ColX")])
    catalog = FieldCatalog.from_overrides([("Y", "ColY")], base=base)

    assert catalog.column_order[-2:] == ("ColX", "ColY")


def test_catalog_is_read_only():
    catalog = FieldCatalog.default()

    with pytest.raises(TypeError):
        catalog.source_to_column["New"] = "Col"
    with pytest.raises(AttributeError):
        catalog.column_order = ("a",)


def test_missing_boundary_entry_rejected():
    with pytest.raises(ValueError):
        FieldCatalog(column_order=("A",), source_to_column={"a": "A"})


def test_duplicate_columns_rejected():
    with pytest.raises(ValueError):
        FieldCatalog(column_order=("A", "A"), source_to_column={BOUNDARY_SENTINEL: "Item", "a": "A"})
