"""Versioned registry of synthesized block schemas.

Entries are keyed by (component name, category). Re-registering a schema
with the same (name, kind) field set only refreshes the timestamp; any
difference archives the previous version as a per-component sibling
(`cardGrid.Programs.v1.ts`), bumps the version and appends to the changelog.
The whole registry is one JSON document, loaded on construction and
rewritten after every registration.
"""

from __future__ import annotations

import json
import re
import shutil
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from .log import get_logger
from .model import BlockmapError, Category, FieldSchema

logger = get_logger("registry")

REGISTRY_FORMAT = 1
UNSAFE_NAME = re.compile(r"[^A-Za-z0-9_-]")

Signature = list[tuple[str, str]]


class RegistryError(BlockmapError):
    """Registry document could not be written."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _timestamp(value: datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")


def _parse_timestamp(value: Any) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def versioned_path(path: str | Path, version: int, component_name: str | None = None) -> Path:
    """'schemas/cardGrid.ts', 1, 'Programs' -> 'schemas/cardGrid.Programs.v1.ts'."""
    path = Path(path)
    owner = "." + UNSAFE_NAME.sub("_", component_name) if component_name else ""
    return path.with_name(f"{path.stem}{owner}.v{version}{path.suffix}")


@dataclass
class RegistryEntry:
    component_name: str
    category: Category
    version: int
    schema_artifact_path: str
    last_modified_at: datetime
    changelog: list[str] = field(default_factory=list)
    fields: Signature | None = None
    source: str | None = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.component_name, self.category.value)

    def to_dict(self) -> dict[str, Any]:
        return {
            "componentName": self.component_name,
            "category": self.category.value,
            "version": self.version,
            "schemaArtifactPath": self.schema_artifact_path,
            "lastModifiedAt": _timestamp(self.last_modified_at),
            "changelog": list(self.changelog),
            "fields": [list(pair) for pair in self.fields] if self.fields is not None else None,
            "source": self.source,
        }

    @classmethod
    def from_dict(cls, data: Any) -> RegistryEntry | None:
        """Tolerant parse; None for entries that can't be recovered."""
        if not isinstance(data, dict):
            return None
        try:
            category = Category(data.get("category") or data.get("blockType"))
        except ValueError:
            return None
        name = data.get("componentName")
        version = data.get("version")
        path = data.get("schemaArtifactPath") or data.get("schemaPath")
        if not isinstance(name, str) or not isinstance(version, int) or not isinstance(path, str):
            return None

        raw_fields = data.get("fields")
        fields = None
        if isinstance(raw_fields, list):
            fields = [tuple(pair) for pair in raw_fields if isinstance(pair, list) and len(pair) == 2]
        changelog = data.get("changelog")
        source = data.get("source")
        return cls(
            component_name=name,
            category=category,
            version=version,
            schema_artifact_path=path,
            last_modified_at=_parse_timestamp(data.get("lastModifiedAt") or data.get("lastModified")) or _utcnow(),
            changelog=[str(line) for line in changelog] if isinstance(changelog, list) else [],
            fields=fields,
            source=source if isinstance(source, str) else None,
        )


@dataclass
class RegistrationOutcome:
    entry: RegistryEntry
    status: str  # created | updated | unchanged
    archived_path: Path | None = None

    @property
    def changed(self) -> bool:
        return self.status != "unchanged"


def describe_change(old: Signature | None, new: Signature) -> str:
    if old is None:
        return "field set unknown"
    old_kinds, new_kinds = dict(old), dict(new)
    added = [name for name in new_kinds if name not in old_kinds]
    removed = [name for name in old_kinds if name not in new_kinds]
    retyped = [name for name in new_kinds if name in old_kinds and old_kinds[name] != new_kinds[name]]
    parts = []
    if added:
        parts.append(f"added: {', '.join(added)}")
    if removed:
        parts.append(f"removed: {', '.join(removed)}")
    if retyped:
        parts.append(f"changed: {', '.join(retyped)}")
    return "; ".join(parts)


class SchemaRegistry:
    """Persistent map of (component, category) to schema versions."""

    def __init__(self, path: str | Path, clock: Callable[[], datetime] | None = None):
        self.path = Path(path)
        self._clock = clock or _utcnow
        self._entries: dict[tuple[str, str], RegistryEntry] = {}
        self._load()

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, component_name: str, category: Category) -> RegistryEntry | None:
        return self._entries.get((component_name, category.value))

    def entries(self) -> list[RegistryEntry]:
        return list(self._entries.values())

    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Could not read registry %s (%s); starting with an empty registry", self.path, exc)
            return

        raw_entries = payload.get("entries") if isinstance(payload, dict) else payload
        if not isinstance(raw_entries, list):
            logger.warning("Registry %s has no entry list; starting with an empty registry", self.path)
            return
        for raw in raw_entries:
            entry = RegistryEntry.from_dict(raw)
            if entry is None:
                logger.warning("Skipping malformed registry entry in %s: %r", self.path, raw)
                continue
            self._entries[entry.key] = entry
        logger.debug("Loaded %d registry entries from %s", len(self._entries), self.path)

    def save(self) -> None:
        payload = {
            "version": REGISTRY_FORMAT,
            "entries": [entry.to_dict() for entry in self._entries.values()],
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
        except OSError as exc:
            raise RegistryError(f"Could not write registry {self.path}: {exc}") from exc

    def register(
        self,
        component_name: str,
        category: Category,
        schema: FieldSchema,
        artifact_path: str | Path,
        source: str | None = None,
    ) -> RegistrationOutcome:
        """Record a schema, versioning it when its field set changed.

        ``source`` is the artifact text the caller is about to write. It is
        kept on the entry so that a later version bump can archive exactly
        this component's schema, even when other components of the same
        category have since overwritten the shared artifact.
        """
        now = self._clock()
        signature = schema.field_signature()
        existing = self.get(component_name, category)

        if existing is None:
            entry = RegistryEntry(
                component_name=component_name,
                category=category,
                version=1,
                schema_artifact_path=str(artifact_path),
                last_modified_at=now,
                changelog=["Version 1: Initial registration"],
                fields=signature,
                source=source,
            )
            self._entries[entry.key] = entry
            self.save()
            return RegistrationOutcome(entry, "created")

        if existing.fields == signature:
            existing.last_modified_at = now
            existing.source = source if source is not None else existing.source
            self.save()
            return RegistrationOutcome(existing, "unchanged")

        archived = self._archive(existing)
        change = describe_change(existing.fields, signature)
        existing.version += 1
        existing.schema_artifact_path = str(artifact_path)
        existing.fields = signature
        existing.source = source
        existing.last_modified_at = now
        existing.changelog.append(f"Version {existing.version}: Schema updated ({change})")
        self.save()
        return RegistrationOutcome(existing, "updated", archived)

    def _archive(self, entry: RegistryEntry) -> Path | None:
        """Keep the entry's current version as a per-component ``.vN`` sibling."""
        previous = Path(entry.schema_artifact_path)
        archived = versioned_path(previous, entry.version, entry.component_name)
        if entry.source is not None:
            archived.parent.mkdir(parents=True, exist_ok=True)
            archived.write_text(entry.source, encoding="utf-8")
        elif previous.exists():
            # entries saved without their source: the shared file is all there is
            shutil.copy2(previous, archived)
        else:
            return None
        logger.debug("Archived %s v%d to %s", entry.component_name, entry.version, archived)
        return archived
