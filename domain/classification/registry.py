import logging

from domain.tables.classifier import ClassifierTables

from .base import ClassificationLayer

logger = logging.getLogger(__name__)

# Layer name -> layer class
_LAYER_REGISTRY: dict[str, type[ClassificationLayer]] = {}


def register_layer(name: str, layer_cls: type[ClassificationLayer], *, override: bool = False) -> None:
    """Register a layer class under the name used in the `layers:` table.

    This is the plugin hook: layer modules call this at import time.
    """
    if (name in _LAYER_REGISTRY) and not override:
        existing = _LAYER_REGISTRY[name]
        raise RuntimeError(
            f"Layer already registered for name={name}: {existing.__name__}. Use override=True to replace."
        )
    _LAYER_REGISTRY[name] = layer_cls
    logger.debug("Registered classification layer %s: %s", name, layer_cls.__name__)


def get_layer_class(name: str) -> type[ClassificationLayer] | None:
    """Return the registered layer class (or None if unknown)."""
    return _LAYER_REGISTRY.get(name)


def make_layers(tables: ClassifierTables) -> list[ClassificationLayer]:
    """
    Build the enabled layers declared in the classifier tables, in table order.

    Raises:
        RuntimeError: If a declared layer name has no registered class.
    """
    layers: list[ClassificationLayer] = []
    for spec in tables.layers:
        if not spec.enabled:
            logger.debug("Layer %s disabled in tables v%s; skipping.", spec.name, tables.version)
            continue
        layer_cls = get_layer_class(spec.name)
        if layer_cls is None:
            raise RuntimeError(
                f"No classification layer registered for name='{spec.name}'. "
                f"Known layers: {sorted(_LAYER_REGISTRY)}"
            )
        layers.append(layer_cls.from_tables(tables, weight=spec.weight))
    return layers
