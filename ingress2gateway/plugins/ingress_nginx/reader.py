"""Reads ingress-nginx Ingresses and their Services from manifest files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ...core.exceptions import ManifestLoadError
from ...core.storage import ProviderStorage
from ...io.manifest_loader import ManifestLoader
from ...models.kubernetes import Ingress, Service

logger = logging.getLogger(__name__)

_INGRESS_API_VERSIONS = {"networking.k8s.io/v1"}


class IngressNginxReader:
    """Keeps Ingresses of one ingress class and every Service."""

    def __init__(self, ingress_class: str):
        self._ingress_class = ingress_class
        self._logger = logger.getChild(self.__class__.__name__)

    def can_read(self, file_path: Path) -> bool:
        return ManifestLoader.can_load(file_path)

    def read_from_file(self, file_path: Path) -> ProviderStorage:
        return self.read_objects(ManifestLoader.load(file_path), str(file_path))

    def read_objects(
        self, objects: list[dict[str, Any]], origin: str = "<memory>"
    ) -> ProviderStorage:
        storage = ProviderStorage()
        skipped = 0
        for index, obj in enumerate(objects):
            kind = obj.get("kind")
            try:
                if kind == "Ingress" and obj.get("apiVersion") in _INGRESS_API_VERSIONS:
                    ingress = Ingress.model_validate(obj)
                    if ingress.ingress_class == self._ingress_class:
                        storage.ingresses.append(ingress)
                    else:
                        skipped += 1
                elif kind == "Service":
                    service = Service.model_validate(obj)
                    storage.services[service.key] = service
            except ValidationError as e:
                raise ManifestLoadError(
                    f"Invalid {kind}: {e}", file_path=origin, document_index=index
                ) from e

        self._logger.info(
            f"Read {len(storage.ingresses)} Ingresses of class "
            f"'{self._ingress_class}' and {len(storage.services)} Services "
            f"({skipped} Ingresses of other classes skipped)"
        )
        return storage
