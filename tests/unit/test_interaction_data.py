from __future__ import annotations

import dataclasses

import pytest

from phagemap.models.interaction_data import ParsedInteractionData


def _data(**overrides) -> ParsedInteractionData:
    fields = dict(
        bacteria_names=("B1", "B2"),
        phage_names=("P1", "P2", "P3"),
        interactions=((1, 0, 1), (0, 0, 1)),
    )
    fields.update(overrides)
    return ParsedInteractionData(**fields)


def test_valid_construction_and_helpers():
    data = _data()
    assert data.shape == (2, 3)
    assert data.positive_count == 3
    assert list(data.rows()) == [("B1", (1, 0, 1)), ("B2", (0, 0, 1))]


def test_to_dict_uses_camel_case_lists():
    assert _data().to_dict() == {
        "bacteriaNames": ["B1", "B2"],
        "phageNames": ["P1", "P2", "P3"],
        "interactions": [[1, 0, 1], [0, 0, 1]],
    }


def test_consumer_payload_aligns_headers_and_values():
    payload = _data().to_consumer_payload()
    assert payload["headers"] == ["P1", "P2", "P3"]
    assert payload["bacteria"] == [
        {"name": "B1", "values": [1, 0, 1]},
        {"name": "B2", "values": [0, 0, 1]},
    ]


def test_is_immutable():
    data = _data()
    with pytest.raises(dataclasses.FrozenInstanceError):
        data.bacteria_names = ("X",)  # type: ignore[misc]


@pytest.mark.parametrize(
    "overrides, fragment",
    [
        ({"phage_names": ()}, "phage_names must not be empty"),
        ({"bacteria_names": (), "interactions": ()}, "bacteria_names must not be empty"),
        ({"bacteria_names": ("B1", "")}, "non-empty"),
        ({"interactions": ((1, 0, 1),)}, "expected 2"),
        ({"interactions": ((1, 0, 1), (0, 1))}, "expected 3"),
        ({"interactions": ((1, 0, 2), (0, 0, 1))}, "non-binary"),
        ({"interactions": ((1, 0, True), (0, 0, 1))}, "non-binary"),
        ({"interactions": ((1, 0, 1.0), (0, 0, 1))}, "non-binary"),
    ],
)
def test_invariants_are_enforced(overrides, fragment):
    with pytest.raises(ValueError) as e:
        _data(**overrides)
    assert fragment in str(e.value)
