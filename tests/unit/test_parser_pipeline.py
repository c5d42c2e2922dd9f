from __future__ import annotations

import pytest

from phagemap import DecodeError, StructureError, parse_interaction_workbook


def _assert_invariants(data) -> None:
    assert len(data.interactions) == len(data.bacteria_names)
    assert all(len(row) == len(data.phage_names) for row in data.interactions)
    assert all(v in (0, 1) for row in data.interactions for v in row)
    assert data.phage_names and data.bacteria_names


def test_scenario_a_minimal_sheet(make_workbook):
    data = parse_interaction_workbook(make_workbook([
        ["metadata"],
        ["", "", "PhageA", "PhageB"],
        ["Bact1", "", 1, 0],
    ]))
    assert data.bacteria_names == ("Bact1",)
    assert data.phage_names == ("PhageA", "PhageB")
    assert data.interactions == ((1, 0),)


def test_scenario_b_header_with_two_columns(make_workbook):
    with pytest.raises(StructureError) as e:
        parse_interaction_workbook(make_workbook([
            ["metadata"],
            ["Strain", "Cluster"],
            ["Bact1", "A"],
        ]))
    assert "insufficient header columns" in str(e.value)


def test_scenario_c_two_rows(make_workbook):
    with pytest.raises(StructureError) as e:
        parse_interaction_workbook(make_workbook([
            ["metadata"],
            ["", "", "PhageA"],
        ]))
    assert "insufficient rows" in str(e.value)


def test_scenario_d_text_cell_reads_as_zero(make_workbook):
    data = parse_interaction_workbook(make_workbook([
        ["metadata"],
        ["", "", "PhageA", "PhageB"],
        ["Bact1", "", "yes", 1],
    ]))
    assert data.interactions == ((0, 1),)


def test_scenario_e_short_row_is_padded(make_workbook):
    data = parse_interaction_workbook(make_workbook([
        ["metadata"],
        ["", "", "PhageA", "PhageB", "PhageC"],
        ["Bact1", "", 1, 1, 1],
        ["Bact2", "", 1, 0],
    ]))
    assert data.interactions == ((1, 1, 1), (1, 0, 0))


def test_extra_columns_beyond_header_are_dropped(make_workbook):
    data = parse_interaction_workbook(make_workbook([
        ["metadata"],
        ["", "", "PhageA", "PhageB"],
        ["Bact1", "", 0, 1, 1, 1, "note"],
    ]))
    assert data.interactions == ((0, 1),)


def test_full_sheet(host_range_bytes: bytes):
    data = parse_interaction_workbook(host_range_bytes)
    assert data.bacteria_names == ("E. coli K12", "E. coli B", "S. enterica LT2")
    assert data.phage_names == ("phiA1", "phiB2", "T4-like")
    assert data.interactions == ((1, 0, 1), (0, 0, 1), (1, 1, 0))
    _assert_invariants(data)


def test_parsing_is_idempotent(host_range_bytes: bytes):
    assert parse_interaction_workbook(host_range_bytes) == parse_interaction_workbook(host_range_bytes)


def test_row_order_follows_sheet(make_workbook, host_range_rows):
    reordered = host_range_rows[:2] + list(reversed(host_range_rows[2:]))
    original = parse_interaction_workbook(make_workbook(host_range_rows))
    flipped = parse_interaction_workbook(make_workbook(reordered))
    assert flipped.bacteria_names == tuple(reversed(original.bacteria_names))
    assert flipped.interactions == tuple(reversed(original.interactions))


def test_messy_sheet_keeps_invariants(make_workbook):
    data = parse_interaction_workbook(make_workbook([
        ["Host range", None, None, None, None, None],
        ["Strain", "Group", " phiA ", None, 12, "phiC"],
        ["  K12  ", None, 3, "?", None],
        [None, None, 1, 1, 1, 1],
        ["K12", "dup", -2, 0.0, "0", "1", 9, 9],
        [7, None, "n/a"],
        ["  ", None, 1],
    ]))
    assert data.phage_names == ("phiA", "12", "phiC")
    assert data.bacteria_names == ("K12", "K12", "7")
    # values are read positionally from column C on, one per phage name
    assert data.interactions == ((1, 0, 0), (1, 0, 0), (0, 0, 0))
    _assert_invariants(data)


def test_bad_buffer_raises_decode_error():
    with pytest.raises(DecodeError):
        parse_interaction_workbook(b"\x00\x01\x02 not excel")


def test_no_bacteria_rows(make_workbook):
    with pytest.raises(StructureError) as e:
        parse_interaction_workbook(make_workbook([
            ["metadata", None, None],
            ["", "", "PhageA"],
            [None, "", 1],
        ]))
    assert "no bacteria rows" in str(e.value)


def test_no_phage_names(make_workbook):
    with pytest.raises(StructureError) as e:
        parse_interaction_workbook(make_workbook([
            ["metadata", None, None, None],
            ["Strain", "Group", " ", "  "],
            ["B1", "", 1, 1],
        ]))
    assert "no phage names" in str(e.value)
