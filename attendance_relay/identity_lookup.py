import json
import logging
import os
from dataclasses import dataclass
from typing import Dict

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmployeeIdentity:
    employee_id: str
    name: str


UNKNOWN_IDENTITY = EmployeeIdentity(employee_id="unknown", name="unknown")


class IdentityLookup:
    # {"<IDm>": {"employeeId": "...", "name": "..."}}; unreadable file -> empty mapping.
    def __init__(self, path: str) -> None:
        self.path = path
        self._entries: Dict[str, EmployeeIdentity] = {}
        self._load()

    def __len__(self) -> int:
        return len(self._entries)

    def resolve(self, idm: str) -> EmployeeIdentity:
        return self._entries.get(idm, UNKNOWN_IDENTITY)

    def _load(self) -> None:
        if not os.path.exists(self.path):
            logger.warning("identity_lookup.missing path=%s", self.path)
            return
        try:
            with open(self.path, "r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, ValueError) as exc:
            logger.warning("identity_lookup.load_failed path=%s error=%s", self.path, exc)
            return
        if not isinstance(payload, dict):
            logger.warning("identity_lookup.load_failed path=%s error=not_an_object", self.path)
            return

        loaded: Dict[str, EmployeeIdentity] = {}
        skipped = 0
        for idm, item in payload.items():
            if not isinstance(item, dict):
                skipped += 1
                continue
            employee_id = item.get("employeeId")
            name = item.get("name")
            if not isinstance(employee_id, str) or not employee_id:
                skipped += 1
                continue
            loaded[idm] = EmployeeIdentity(
                employee_id=employee_id,
                name=name if isinstance(name, str) else "unknown",
            )
        self._entries = loaded
        logger.info(
            "identity_lookup.loaded path=%s entries=%d skipped=%d",
            self.path,
            len(loaded),
            skipped,
        )
