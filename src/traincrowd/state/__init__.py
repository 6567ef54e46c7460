"""State layer.

The record table is the single source of truth for what each compartment
card shows. The live poller and the simulator replace records here; the
render engine only reads them.
"""

from traincrowd.state.app import AppState, update_connection_status
from traincrowd.state.store import RecordTable, initial_records

__all__ = ["AppState", "RecordTable", "initial_records", "update_connection_status"]
