"""Run configuration for the block mapping pipeline."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from .model import BlockmapError

DEFAULT_OUTPUT = Path("generated-blocks")
DEFAULT_TENANT = "default"
REGISTRY_FILENAME = "block-registry.json"
COMPONENT_EXTENSIONS = (".tsx", ".jsx", ".ts", ".js")

SAFE_SEGMENT = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class ConfigError(BlockmapError):
    """Invalid run configuration."""


@dataclass(frozen=True)
class RunConfig:
    input_path: Path
    output_root: Path
    tenant: str
    registry_path: Path
    extensions: tuple[str, ...] = COMPONENT_EXTENSIONS
    verbose: bool = False

    @classmethod
    def create(
        cls,
        input_path: str | Path,
        output_root: str | Path | None = None,
        tenant: str | None = None,
        registry_path: str | Path | None = None,
        verbose: bool = False,
    ) -> RunConfig:
        """Apply defaults and validate. The registry defaults to a file beside the output root."""
        output = Path(output_root) if output_root else DEFAULT_OUTPUT
        tenant = tenant or DEFAULT_TENANT
        if not SAFE_SEGMENT.match(tenant) or ".." in tenant:
            raise ConfigError(f"Invalid tenant name: {tenant!r}")
        registry = Path(registry_path) if registry_path else output.parent / REGISTRY_FILENAME
        return cls(
            input_path=Path(input_path),
            output_root=output,
            tenant=tenant,
            registry_path=registry,
            verbose=verbose,
        )

    @property
    def tenant_dir(self) -> Path:
        return self.output_root / self.tenant

    @property
    def schemas_dir(self) -> Path:
        return self.tenant_dir / "schemas"

    @property
    def content_dir(self) -> Path:
        return self.tenant_dir / "sync-json"
