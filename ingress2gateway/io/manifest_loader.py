"""Read Kubernetes manifests from local YAML / JSON files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Final

from ruamel.yaml import YAML

from ..core.exceptions import ManifestLoadError

logger = logging.getLogger(__name__)

_YAML_EXTS: Final[set[str]] = {".yaml", ".yml"}
_JSON_EXTS: Final[set[str]] = {".json"}

_yaml_parser = YAML(typ="safe")  # safe loader, YAML 1.2


class ManifestLoader:
    """Read a manifest file and return its objects as plain mappings."""

    supported_exts: set[str] = _YAML_EXTS | _JSON_EXTS

    @staticmethod
    def can_load(path: str | Path) -> bool:
        return Path(path).suffix.lower() in ManifestLoader.supported_exts

    @staticmethod
    def load(path: str | Path) -> list[dict[str, Any]]:
        """
        Load every object of a file.

        Multi-document YAML streams and ``kind: List`` wrappers are flattened;
        empty documents are dropped.
        """
        file_path = Path(path)

        if not file_path.exists():
            logger.error("File not found: %s", file_path)
            raise ManifestLoadError(
                f"File not found: {file_path}", file_path=str(file_path)
            )

        if not ManifestLoader.can_load(file_path):
            raise ManifestLoadError(
                f"Unsupported extension '{file_path.suffix}'. "
                f"Supported: {', '.join(sorted(ManifestLoader.supported_exts))}",
                file_path=str(file_path),
            )

        raw_text = file_path.read_text(encoding="utf-8")

        try:
            if file_path.suffix.lower() in _YAML_EXTS:
                documents = list(_yaml_parser.load_all(raw_text))
            else:
                documents = [json.loads(raw_text)]
        except Exception as exc:
            raise ManifestLoadError(
                f"Cannot parse {file_path.name}: {exc}", file_path=str(file_path)
            ) from exc

        objects: list[dict[str, Any]] = []
        for index, document in enumerate(documents):
            if document is None:
                continue
            if not isinstance(document, dict):
                raise ManifestLoadError(
                    "Each document must be a mapping",
                    file_path=str(file_path),
                    document_index=index,
                )
            if document.get("kind") == "List" or (
                "items" in document and "kind" not in document
            ):
                items = document.get("items") or []
                objects.extend(item for item in items if isinstance(item, dict))
            else:
                objects.append(document)

        logger.debug("Manifest loaded (%d objects)", len(objects))
        return objects
