"""EventStore — the persisted, append-only incident log and user settings.

Design notes:
    - The log lives in one slot as a serialised JSON array of flat records
      ({"t", "s", "n"}).  Every save rewrites the whole array.
    - Loading never fails.  A missing slot is an empty log; an unparsable
      blob is logged and treated as empty; individual bad records are
      repaired or skipped (see ``Event.from_record``).
    - The store keeps no copy of the log between calls; every read goes
      back to the slots.
    - The two user settings live in their own scalar slots.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any

from stoploss.domain.event import Event
from stoploss.domain.settings import (
    DEFAULT_COOLING_MINUTES,
    DEFAULT_STOP_LOSS_LIMIT,
    UserSettings,
)
from stoploss.store.slots import KeyValueStore

logger = logging.getLogger(__name__)

RECORDS_KEY = "RECORDS_JSON"
LIMIT_KEY = "MAX_LIMIT"
COOLING_KEY = "COOLING_TIME"


# ── Codec ────────────────────────────────────────────────────────────────────

def serialize_log(log: Sequence[Event]) -> str:
    """Encode the full log as a JSON array of records."""
    return json.dumps([e.to_record() for e in log], ensure_ascii=False)


def deserialize_log(blob: Any) -> list[Event]:
    """Decode a persisted blob, degrading to an empty or partial log.

    Accepts the JSON text written by ``serialize_log`` or an already
    decoded list.  Never raises.
    """
    if blob is None:
        return []

    records = blob
    if isinstance(blob, (str, bytes, bytearray)):
        try:
            records = json.loads(blob)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning("Discarding unparsable event log: %s", exc)
            return []

    if not isinstance(records, list):
        logger.warning("Discarding event log of type %s (expected a list)", type(records).__name__)
        return []

    events: list[Event] = []
    for i, raw in enumerate(records):
        event = Event.from_record(raw)
        if event is None:
            logger.warning("Skipping malformed event record #%d: %r", i, raw)
            continue
        events.append(event)
    return events


# ── Store ────────────────────────────────────────────────────────────────────

class EventStore:
    """Load / save boundary for the incident log and user settings.

    Args:
        slots: Where the data physically lives.
        default_settings: Values reported when the settings slots are empty.
    """

    def __init__(
        self,
        slots: KeyValueStore,
        default_settings: UserSettings | None = None,
    ) -> None:
        self._slots = slots
        self._defaults = default_settings or UserSettings(
            stop_loss_limit=DEFAULT_STOP_LOSS_LIMIT,
            cooling_minutes=DEFAULT_COOLING_MINUTES,
        )

    # ── Event log ────────────────────────────────────────────────────────

    def load(self) -> list[Event]:
        """Current log, in append order."""
        return deserialize_log(self._slots.get(RECORDS_KEY))

    def save(self, log: Sequence[Event]) -> None:
        """Overwrite the persisted log with *log*."""
        self._slots.put({RECORDS_KEY: serialize_log(log)})

    def append(self, event: Event) -> list[Event]:
        """Append *event*, persist, and return the new log."""
        log = self.load()
        log.append(event)
        self.save(log)
        return log

    def reset(self) -> list[Event]:
        """Replace the log with an empty one."""
        self.save([])
        return []

    # ── Settings ─────────────────────────────────────────────────────────

    def load_settings(self) -> UserSettings:
        """Persisted settings; empty or unparsable slots fall back to the defaults."""
        return self._defaults.apply_form_input(
            self._slots.get(LIMIT_KEY),
            self._slots.get(COOLING_KEY),
        )

    def save_settings(self, user_settings: UserSettings) -> None:
        self._slots.put({
            LIMIT_KEY: user_settings.stop_loss_limit,
            COOLING_KEY: user_settings.cooling_minutes,
        })
