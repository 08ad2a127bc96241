"""Serialize emitted resources as a multi-document YAML stream."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML

from ..models.gateway_api import GatewayResources

logger = logging.getLogger(__name__)


class ManifestWriter:
    """Writes GatewayResources as ``---`` separated Kubernetes manifests."""

    def __init__(self):
        self._logger = logger.getChild(self.__class__.__name__)
        self._yaml = YAML()
        self._configure_yaml()

    def _configure_yaml(self):
        self._yaml.indent(mapping=2, sequence=4, offset=2)
        self._yaml.default_flow_style = False
        self._yaml.allow_unicode = True
        self._yaml.explicit_start = True

    def documents(self, resources: GatewayResources) -> list[dict[str, Any]]:
        return [obj.to_manifest() for obj in resources.all_objects()]

    def to_yaml_string(self, resources: GatewayResources) -> str:
        stream = io.StringIO()
        docs = self.documents(resources)
        if docs:
            self._yaml.dump_all(docs, stream)
        return stream.getvalue()

    def save(self, resources: GatewayResources, file_path: str | Path) -> Path:
        """Write the manifests to disk, creating parent directories."""
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_yaml_string(resources), encoding="utf-8")
        self._logger.info(f"Wrote {len(resources.all_objects())} objects to {path}")
        return path
