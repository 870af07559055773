# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

import yaml

from admingate.errors import AlreadyExistsError, NotFoundError, StoreError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminRecord:
    identity: str
    password_hash: str
    created_at: str


class AdminStore:
    """Single-record credential store backed by one YAML file.

    ``create`` is a conditional write: the record is written to a temp file
    in the same directory and hard-linked into place. ``os.link`` refuses to
    overwrite, so only one creator can ever win.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def create(self, identity: str, password_hash: str) -> AdminRecord:
        record = AdminRecord(
            identity=identity,
            password_hash=password_hash,
            created_at=datetime.now(timezone.utc).isoformat(timespec="seconds"),
        )
        raw = {
            "version": 1,
            "admin": {
                "identity": record.identity,
                "password_hash": record.password_hash,
                "created_at": record.created_at,
            },
        }
        body = yaml.safe_dump(raw, sort_keys=False, allow_unicode=True)

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".admin-", suffix=".tmp", dir=str(self.path.parent))
        except OSError as e:
            raise StoreError("Could not write credential store.", error=str(e))

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(body)
            os.chmod(tmp_name, 0o600)
            os.link(tmp_name, str(self.path))
        except FileExistsError:
            logger.warning("admin create rejected: record already exists at %s", self.path)
            raise AlreadyExistsError()
        except OSError as e:
            raise StoreError("Could not write credential store.", error=str(e))
        finally:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass

        logger.info("admin record created for %s", identity)
        return record

    def load(self) -> AdminRecord:
        if not self.path.exists():
            raise NotFoundError("No admin account.")
        try:
            raw = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            logger.error("credential store unreadable: %s", e)
            raise StoreError(error=str(e))

        admin = raw.get("admin") if isinstance(raw, dict) else None
        if not isinstance(admin, dict):
            raise StoreError(error="missing 'admin' mapping")
        identity = str(admin.get("identity") or "").strip()
        ph = str(admin.get("password_hash") or "").strip()
        if not identity or not ph:
            raise StoreError(error="incomplete admin record")
        return AdminRecord(
            identity=identity,
            password_hash=ph,
            created_at=str(admin.get("created_at") or ""),
        )
