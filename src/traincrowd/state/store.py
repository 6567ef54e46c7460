"""Fixed in-memory record table.

The table holds exactly one record per known compartment. Records are
replaced wholesale; compartments can be neither added nor removed.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from datetime import UTC, datetime

from traincrowd._constants import COMPARTMENT_IDS, LIVE_COMPARTMENT, SIMULATED_COMPARTMENTS
from traincrowd.models.compartment import CompartmentRecord


def initial_records(now: datetime | None = None) -> dict[str, CompartmentRecord]:
    """Records shown before any poll or simulation has run."""
    ts = now or datetime.now(UTC)
    return {
        LIVE_COMPARTMENT: CompartmentRecord(
            crowd_status="GREEN",
            sensors={"ir1": False, "ir2": False, "ir3": False, "ultrasonic": False},
            last_updated=ts,
            is_live=True,
        ),
        SIMULATED_COMPARTMENTS[0]: CompartmentRecord(
            crowd_status="GREEN",
            sensors={"ir1": False, "ir2": False, "ultrasonic": False},
            last_updated=ts,
            is_live=False,
        ),
        SIMULATED_COMPARTMENTS[1]: CompartmentRecord(
            crowd_status="YELLOW",
            sensors={"ir1": True, "ir2": False, "ultrasonic": True},
            last_updated=ts,
            is_live=False,
        ),
    }


class RecordTable(Mapping[str, CompartmentRecord]):
    """Mapping from compartment identifier to its current record."""

    def __init__(self, records: Mapping[str, CompartmentRecord] | None = None) -> None:
        seed = dict(records) if records is not None else initial_records()
        if set(seed) != set(COMPARTMENT_IDS):
            raise ValueError(f"record table needs exactly {COMPARTMENT_IDS}, got {tuple(seed)}")
        self._records: dict[str, CompartmentRecord] = {cid: seed[cid] for cid in COMPARTMENT_IDS}

    def __getitem__(self, compartment_id: str) -> CompartmentRecord:
        return self._records[compartment_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def replace(self, compartment_id: str, record: CompartmentRecord) -> None:
        """Overwrite the record for a known compartment."""
        if compartment_id not in self._records:
            raise KeyError(f"unknown compartment {compartment_id!r}")
        self._records[compartment_id] = record

    def snapshot(self) -> dict[str, CompartmentRecord]:
        """Shallow copy of the table; records themselves are immutable."""
        return dict(self._records)
