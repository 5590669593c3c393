from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Dict, MutableMapping

from pydantic import ValidationError

from app.records.errors import MissingSelection
from app.records.models import IncidentKey

SELECTED_INCIDENT_KEY = "selectedIncident"
INCIDENT_JSON_KEY = "incident_json"


@dataclass
class SessionHandoff:
    """
    Key/value passing between the list and details views of one session.

    Writes overwrite; nothing expires.
    """

    storage: MutableMapping[str, str] = field(default_factory=dict)

    def write_selection(self, key: IncidentKey) -> None:
        self.storage[SELECTED_INCIDENT_KEY] = json.dumps(
            {"incident_number": key.incident_number, "unit_id": key.unit_id}
        )

    def read_selection(self) -> IncidentKey:
        raw = self.storage.get(SELECTED_INCIDENT_KEY)
        if not raw:
            raise MissingSelection()
        try:
            return IncidentKey.model_validate(json.loads(raw))
        except (ValueError, ValidationError) as e:
            raise MissingSelection(f"Stored selection is unreadable: {e}") from e


class CrossSiteStorage:
    """
    Extension-scoped key/value storage shared with another site.

    The concrete binding lives in the browser extension; the service only sees
    this capability.
    """

    def get(self, key: str, default: str | None = None) -> str | None:  # pragma: no cover
        raise NotImplementedError

    def set(self, key: str, value: str | None) -> None:  # pragma: no cover
        raise NotImplementedError


@dataclass
class MemoryCrossSiteStorage(CrossSiteStorage):
    values: Dict[str, str] = field(default_factory=dict)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self.values.get(key, default)

    def set(self, key: str, value: str | None) -> None:
        # Setting None clears the key, the way the extension's clear helper does.
        if value is None:
            self.values.pop(key, None)
        else:
            self.values[key] = value
