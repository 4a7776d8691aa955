"""Control-plane component specs.

Each component in an init file is either managed outside the workflow
(``external``) or installed by it (``local``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from .errors import ConfigError

ETCD = "etcd"
APISERVER = "apiserver"

# Install order; later components depend on earlier ones.
COMPONENTS = [ETCD, APISERVER]

DEFAULT_IMAGES = {
    ETCD: "registry.k8s.io/etcd:3.5.13-0",
    APISERVER: "registry.k8s.io/kube-apiserver:v1.30.0",
}


@dataclass(frozen=True)
class ExternalComponent:
    """Component supplied by an operator; the workflow never installs it."""

    reference: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class LocalComponent:
    """Component the workflow installs into the cluster."""

    image: str
    replicas: int = 1
    extra_args: list[str] = field(default_factory=list)
    labels: dict[str, str] = field(default_factory=dict)


ComponentSpec = Union[ExternalComponent, LocalComponent]


def parse_component_spec(component: str, raw: dict[str, Any] | None) -> ComponentSpec:
    """Build a component spec from its init file entry.

    Args:
        component: Component name, used for defaults and error messages.
        raw: Mapping with exactly one of ``external`` or ``local``.
            ``None`` or an empty mapping means a local install with defaults.

    Returns:
        ExternalComponent or LocalComponent.

    Raises:
        ConfigError: If the entry is malformed.
    """
    raw = raw or {"local": {}}
    if not isinstance(raw, dict):
        raise ConfigError(f"component '{component}' must be a mapping")

    keys = {"external", "local"} & set(raw)
    if len(keys) != 1:
        raise ConfigError(
            f"component '{component}' must set exactly one of 'external' or 'local'"
        )

    if "external" in raw:
        reference = raw["external"] or {}
        if not isinstance(reference, dict):
            raise ConfigError(f"component '{component}': 'external' must be a mapping")
        return ExternalComponent(reference=dict(reference))

    local = raw["local"] or {}
    if not isinstance(local, dict):
        raise ConfigError(f"component '{component}': 'local' must be a mapping")

    image = local.get("image") or DEFAULT_IMAGES.get(component)
    if not image:
        raise ConfigError(f"component '{component}' needs an image")

    try:
        replicas = int(local.get("replicas", 1))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"component '{component}' has invalid replicas: {e}") from e
    if replicas < 1:
        raise ConfigError(f"component '{component}' needs at least one replica")

    extra_args = local.get("extra_args") or []
    if not isinstance(extra_args, list):
        raise ConfigError(f"component '{component}': 'extra_args' must be a list")

    labels = local.get("labels") or {}
    if not isinstance(labels, dict):
        raise ConfigError(f"component '{component}': 'labels' must be a mapping")

    return LocalComponent(
        image=str(image),
        replicas=replicas,
        extra_args=[str(a) for a in extra_args],
        labels={str(k): str(v) for k, v in labels.items()},
    )
