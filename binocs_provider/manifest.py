from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import BaseModel, Field

from binocs_provider.resources.channel import ChannelResource
from binocs_provider.resources.check import CheckResource


class Manifest(BaseModel):
    checks: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    channels: Dict[str, Dict[str, Any]] = Field(default_factory=dict)


@dataclass
class Diagnostic:
    address: str
    field: str
    message: str


def load_manifest(path: Path) -> Manifest:
    if not path.exists():
        raise FileNotFoundError(f"Missing manifest at {path}")

    data = yaml.safe_load(path.read_text()) or {}
    manifest = Manifest.model_validate(data)

    duplicates = sorted(set(manifest.checks) & set(manifest.channels))
    if duplicates:
        raise ValueError(
            f"Duplicate resource names across checks and channels: {', '.join(duplicates)}"
        )
    return manifest


def validate_manifest(manifest: Manifest) -> list[Diagnostic]:
    """Validate every declared resource offline; no API calls are made."""
    out: list[Diagnostic] = []
    for resource, entries in (
        (CheckResource(), manifest.checks),
        (ChannelResource(), manifest.channels),
    ):
        for name, config in sorted(entries.items()):
            address = f"{resource.type_name}.{name}"
            for err in resource.validate(config):
                out.append(Diagnostic(address=address, field=err.field, message=err.message))
    return out
