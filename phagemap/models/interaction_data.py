from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

"""ParsedInteractionData: the validated bacteria x phage matrix.

Created once per parse and never mutated afterwards; tuples all the way
down so a caller cannot reorder names independently of matrix rows.
"""

__all__ = [
    "ParsedInteractionData",
]


@dataclass(frozen=True)
class ParsedInteractionData:
    """Binary host-range matrix.

    interactions[i][j] is 1 when bacterium i is infected by phage j.
    Construction checks the shape and value invariants and raises
    ValueError when they do not hold.
    """
    bacteria_names: tuple[str, ...]
    phage_names: tuple[str, ...]
    interactions: tuple[tuple[int, ...], ...]

    def __post_init__(self) -> None:
        if not self.phage_names:
            raise ValueError("phage_names must not be empty")
        if not self.bacteria_names:
            raise ValueError("bacteria_names must not be empty")
        if any(not n for n in self.bacteria_names) or any(not n for n in self.phage_names):
            raise ValueError("names must be non-empty strings")
        if len(self.interactions) != len(self.bacteria_names):
            raise ValueError(
                f"interactions has {len(self.interactions)} rows, "
                f"expected {len(self.bacteria_names)}"
            )
        width = len(self.phage_names)
        for i, row in enumerate(self.interactions):
            if len(row) != width:
                raise ValueError(f"interactions row {i} has {len(row)} values, expected {width}")
            for v in row:
                # bool would compare equal to 0/1; keep the matrix plain int
                if type(v) is not int or v not in (0, 1):
                    raise ValueError(f"interactions row {i} contains non-binary value {v!r}")

    @property
    def shape(self) -> tuple[int, int]:
        return (len(self.bacteria_names), len(self.phage_names))

    @property
    def positive_count(self) -> int:
        """Number of infecting (1) entries."""
        return sum(sum(row) for row in self.interactions)

    def rows(self) -> Iterator[tuple[str, tuple[int, ...]]]:
        """Yield (bacterium name, interaction row) pairs in sheet order."""
        return zip(self.bacteria_names, self.interactions, strict=True)

    def to_dict(self) -> dict[str, Any]:
        return {
            "bacteriaNames": list(self.bacteria_names),
            "phageNames": list(self.phage_names),
            "interactions": [list(r) for r in self.interactions],
        }

    def to_consumer_payload(self) -> dict[str, Any]:
        """Headers plus per-bacterium value rows, positionally aligned.

        This is the shape the cluster aggregation step groups into a tree.
        """
        return {
            "headers": list(self.phage_names),
            "bacteria": [{"name": name, "values": list(values)} for name, values in self.rows()],
        }
