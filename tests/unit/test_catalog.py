from __future__ import annotations

import pytest

from weldcalc.domain.errors import DataUnavailableError, RecordNotFoundError
from weldcalc.domain.models import PipeRecord
from weldcalc.engine.catalog import PipeCatalog


def _record(size: str, thickness: str = "1", joint_type: str | None = "BW") -> PipeRecord:
    return PipeRecord(joint_type=joint_type, nominal_size=size, thickness=thickness)


def test_joint_types_are_unique_sorted_and_skip_missing(catalog: PipeCatalog):
    assert catalog.distinct_joint_types() == ["BW", "SW"]


def test_sizes_sort_numerically_not_lexicographically():
    catalog = PipeCatalog([_record("2"), _record("10"), _record("3")])

    assert catalog.distinct_sizes() == ["2", "3", "10"]


def test_sizes_sort_decimal_values():
    catalog = PipeCatalog([_record("10"), _record("9.5"), _record("0.75"), _record("1")])

    assert catalog.distinct_sizes() == ["0.75", "1", "9.5", "10"]


def test_sizes_ignore_non_numeric_residue():
    catalog = PipeCatalog([_record("10 in"), _record("6 in"), _record("n/a"), _record("8")])

    # unparsable values go last
    assert catalog.distinct_sizes() == ["6 in", "8", "10 in", "n/a"]


def test_sizes_without_filter_cover_all_records(catalog: PipeCatalog):
    assert catalog.distinct_sizes() == ["2", "3", "10", "16"]


def test_sizes_filtered_by_joint_type(catalog: PipeCatalog):
    assert catalog.distinct_sizes("SW") == ["2"]
    assert catalog.distinct_sizes("BW") == ["2", "3", "10"]


def test_empty_joint_type_filter_means_unset(catalog: PipeCatalog):
    assert catalog.distinct_sizes("") == catalog.distinct_sizes(None)


def test_thicknesses_require_a_size(catalog: PipeCatalog):
    assert catalog.distinct_thicknesses("BW", None) == []
    assert catalog.distinct_thicknesses(None, "") == []


def test_thicknesses_are_numerically_sorted_and_unique(catalog: PipeCatalog):
    assert catalog.distinct_thicknesses(None, "2") == ["3.91", "5.54"]
    assert catalog.distinct_thicknesses("SW", "2") == ["3.91"]


def test_thickness_order_independent_of_string_padding():
    catalog = PipeCatalog([_record("2", "12.7"), _record("2", "8.18"), _record("2", "10.31")])

    assert catalog.distinct_thicknesses(None, "2") == ["8.18", "10.31", "12.7"]


def test_resolve_record_round_trips_every_row(catalog: PipeCatalog):
    for record in catalog.records:
        resolved = catalog.resolve_record(record.joint_type, record.nominal_size, record.thickness)
        assert resolved.joint_type == record.joint_type
        assert resolved.nominal_size == record.nominal_size
        assert resolved.thickness == record.thickness


def test_resolve_record_first_match_wins(catalog: PipeCatalog):
    resolved = catalog.resolve_record("BW", "2", "5.54")

    assert resolved.filler_2_4 == "0.031"


def test_resolve_record_without_joint_type_takes_first_in_file_order(catalog: PipeCatalog):
    resolved = catalog.resolve_record(None, "2", "3.91")

    assert resolved.joint_type == "SW"


def test_resolve_record_uses_exact_string_match(catalog: PipeCatalog):
    with pytest.raises(RecordNotFoundError):
        catalog.resolve_record(None, "2.0", "5.54")


def test_resolve_record_reports_missing_combination(catalog: PipeCatalog):
    with pytest.raises(RecordNotFoundError, match="No pipe found"):
        catalog.resolve_record("SW", "10", "9.27")
    assert catalog.find_record("SW", "10", "9.27") is None


def test_unavailable_catalog_offers_nothing():
    catalog = PipeCatalog.unavailable()

    assert not catalog.available
    assert catalog.distinct_joint_types() == []
    assert catalog.distinct_sizes() == []
    assert catalog.distinct_thicknesses(None, "2") == []
    with pytest.raises(DataUnavailableError):
        catalog.resolve_record(None, "2", "5.54")
