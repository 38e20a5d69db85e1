"""
Plan state service - owns the current PlanRecord and its save/load round-trip
"""

import threading
from typing import Any, Callable, Dict, Mapping, Optional

from pydantic import TypeAdapter, ValidationError

# Local imports
from models import PlanRecord, SaveStatus
from config import CONFIG


# Attribute names and their camelCase storage keys both resolve to the attribute.
FIELD_NAMES: Dict[str, str] = {}
for _name, _info in PlanRecord.model_fields.items():
    FIELD_NAMES[_name] = _name
    if _info.alias:
        FIELD_NAMES[_info.alias] = _name


def resolve_field_name(name: str) -> str:
    try:
        return FIELD_NAMES[name]
    except KeyError:
        raise KeyError(f"Unknown plan field: {name!r}") from None


def validate_field_value(name: str, value: Any) -> Any:
    """
    Checks `value` against the declared type of the named field, for edits that
    arrive from outside (JSON requests). Raises ValidationError on a mismatch.
    """
    annotation = PlanRecord.model_fields[resolve_field_name(name)].annotation
    return TypeAdapter(annotation).validate_python(value, strict=True)


class TimerScheduler:
    """Runs a callback once after a delay; the returned handle can be cancelled."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


class PlanStore:
    """
    Holds the current PlanRecord and applies edits to it.

    Edits are immediate and never touch the previous record object. The record
    only reaches durable storage on an explicit save(); status moves
    idle -> saving -> saved, and any edit drops it back to idle.
    """

    def __init__(self, storage, storage_key: str = CONFIG["storage_key"],
                 record: Optional[PlanRecord] = None, scheduler=None,
                 saved_delay: float = CONFIG["save_status_delay_seconds"]):
        self.storage = storage
        self.storage_key = storage_key
        self.scheduler = scheduler or TimerScheduler()
        self.saved_delay = saved_delay

        self._record = record if record is not None else PlanRecord()
        self._status: SaveStatus = "idle"
        self._pending_saved = None
        self._save_generation = 0
        self._lock = threading.Lock()

    @property
    def record(self) -> PlanRecord:
        return self._record

    @property
    def status(self) -> SaveStatus:
        with self._lock:
            return self._status

    def load(self) -> None:
        """
        Replaces the current record with the saved one, if there is a usable save.
        A missing entry or one that does not parse as a PlanRecord leaves the
        current record in place.
        """
        saved_data = self.storage.get_item(self.storage_key)
        if saved_data is None:
            print("ℹ️ No saved plan found, using defaults.")
            return

        try:
            record = PlanRecord.model_validate_json(saved_data)
        except ValidationError as e:
            print(f"❌ Failed to parse saved plan data: {e}")
            return

        with self._lock:
            self._record = record
        print(f"📂 Loaded saved plan for {record.full_name}")

    def set_field(self, name: str, value: Any) -> PlanRecord:
        """Replaces one field. Values are stored as given, without validation."""
        return self.set_fields({name: value})

    def set_fields(self, updates: Mapping[str, Any]) -> PlanRecord:
        """Replaces several fields as a single edit."""
        changes = {resolve_field_name(name): value for name, value in updates.items()}

        # Read-copy-write under the lock so concurrent edits are not lost.
        with self._lock:
            record = self._record.model_copy(update=changes)
            self._record = record
            self._cancel_pending_saved()
            self._status = "idle"
        return record

    def save(self) -> None:
        """Writes the whole record under the storage key, replacing any earlier save."""
        with self._lock:
            payload = self._record.model_dump_json(by_alias=True)
            self._cancel_pending_saved()
            self._status = "saving"
            self._save_generation += 1
            generation = self._save_generation

        try:
            self.storage.set_item(self.storage_key, payload)
        except OSError as e:
            print(f"❌ Failed to save plan: {e}")
            with self._lock:
                self._status = "idle"
            raise

        handle = self.scheduler.call_later(self.saved_delay, lambda: self._mark_saved(generation))
        with self._lock:
            if generation == self._save_generation:
                self._pending_saved = handle
            else:
                handle.cancel()

    # ========================================================================
    # HELPER FUNCTIONS
    # ========================================================================

    def _mark_saved(self, generation: int) -> None:
        with self._lock:
            # A later save or edit supersedes this transition.
            if generation != self._save_generation or self._status != "saving":
                return
            self._status = "saved"
            self._pending_saved = None
        print("✅ Plan saved successfully!")

    def _cancel_pending_saved(self) -> None:
        if self._pending_saved is not None:
            self._pending_saved.cancel()
            self._pending_saved = None
