# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List

import yaml

from admingate.errors import StoreError

logger = logging.getLogger(__name__)


class _AppointmentLoader(yaml.SafeLoader):
    """SafeLoader that keeps plain scalars with a colon as strings.

    YAML 1.1 would read ``time: 10:00`` as the base-60 integer 600.
    """

    def resolve(self, kind, value, implicit):
        if kind is yaml.ScalarNode and implicit[0] and ":" in value:
            return "tag:yaml.org,2002:str"
        return super().resolve(kind, value, implicit)


def _plain(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


class AppointmentRepo:
    """Read-only appointment list served behind the access gate.

    The file may hold a bare YAML list, or a mapping with an
    ``appointments`` list. A missing file means no appointments yet.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def list_appointments(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []
        try:
            raw = yaml.load(self.path.read_text(encoding="utf-8"), Loader=_AppointmentLoader)
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            logger.error("appointments file unreadable: %s", e)
            raise StoreError("Appointments are unreadable.", error=str(e))

        if isinstance(raw, dict):
            raw = raw.get("appointments")
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise StoreError("Appointments are unreadable.", error="expected a list")

        out: List[Dict[str, Any]] = []
        for item in raw:
            if not isinstance(item, dict):
                continue
            out.append({str(k): _plain(v) for k, v in item.items()})
        out.sort(key=lambda a: (str(a.get("date") or ""), str(a.get("time") or "")))
        return out
