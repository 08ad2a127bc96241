import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from ..protocols import FeaturePass, FeatureRunner

if TYPE_CHECKING:
    from ...ir.models import IR
    from ...models.kubernetes import Ingress
    from ..validation import FieldError

logger = logging.getLogger(__name__)


class BaseFeatureRunner(FeatureRunner):
    """
    Ordered registry of feature passes acting as a dispatcher.

    Passes run in registration order; each sees the IR as left by the
    previous one. Registering a pass under a name already present replaces
    it in place, keeping its position.
    """

    def __init__(self):
        """Initializes the runner and the pass registry."""
        self._logger = logger.getChild(self.__class__.__name__)
        self._features: dict[str, FeaturePass] = {}

    def register_feature(self, feature: FeaturePass) -> None:
        if feature.name in self._features:
            self._logger.warning(f"Overwriting feature pass: '{feature.name}'")
        self._logger.debug(
            f"Registering feature pass '{feature.__class__.__name__}' "
            f"as '{feature.name}'"
        )
        self._features[feature.name] = feature

    def get_registered_features(self) -> list[FeaturePass]:
        """Returns the passes in execution order."""
        return list(self._features.values())

    def run(self, context: Any, ir: "IR") -> "list[FieldError]":
        """
        Run every registered pass over the IR and collect their errors.

        A pass returning errors does not stop later passes; an exception
        does, after being logged.
        """
        self._logger.info("Starting feature passes.")
        errors: list[FieldError] = []
        for name, feature in self._features.items():
            try:
                found = feature.apply(context, ir)
            except Exception as e:
                self._logger.error(
                    f"Critical failure in feature pass '{name}': {e}", exc_info=True
                )
                raise
            if found:
                self._logger.debug(
                    f"Feature pass '{name}' reported {len(found)} errors"
                )
            errors.extend(found)
        self._logger.info("Feature passes completed.")
        return errors


class BaseFeaturePass(ABC):
    """
    Template for passes driven by annotations on individual source objects.

    Subclasses declare the annotations that trigger them and implement
    ``_apply_to_ingress``; objects carrying none of the triggers are skipped
    without touching the IR.
    """

    name: str = ""
    triggers: tuple[str, ...] = ()

    def __init__(self):
        self._logger = logger.getChild(self.__class__.__name__)

    def apply(self, context: Any, ir: "IR") -> "list[FieldError]":
        errors: list[FieldError] = []
        for ingress in context.ingresses:
            if not self.is_triggered(ingress):
                continue
            errors.extend(self._apply_to_ingress(ingress, context, ir))
        return errors

    def is_triggered(self, ingress: "Ingress") -> bool:
        return any(key in ingress.annotations for key in self.triggers)

    @abstractmethod
    def _apply_to_ingress(
        self, ingress: "Ingress", context: Any, ir: "IR"
    ) -> "list[FieldError]":
        """Apply this pass for a single triggered source object."""
        pass
