"""Kubernetes manifests for control-plane components.

Only the objects the workflow needs to bring a component up; anything richer
(certificates, tuned flags) belongs in the image or the operator's overrides.

The built-in kube-apiserver command sets only ``--etcd-servers`` and
``--secure-port``. kube-apiserver will not start without service-account and
TLS material, so operators must pass flags such as
``--service-account-issuer``, ``--service-account-key-file``,
``--service-account-signing-key-file``, ``--tls-cert-file`` and
``--tls-private-key-file`` through ``apiserver.local.extra_args`` (and mount
the files into the image). Until they do, ``wait-apiserver`` times out.
"""

from __future__ import annotations

from typing import Any

from ..components import APISERVER, ETCD, LocalComponent

ETCD_CLIENT_PORT = 2379
ETCD_PEER_PORT = 2380
APISERVER_PORT = 6443


def component_labels(component: str, name: str) -> dict[str, str]:
    """Labels every pod of a component carries."""
    return {
        "app.kubernetes.io/name": component,
        "app.kubernetes.io/instance": name,
        "app.kubernetes.io/managed-by": "cpinit",
    }


def label_selector(labels: dict[str, str]) -> str:
    """Render labels as a kubectl label selector."""
    return ",".join(f"{k}={v}" for k, v in labels.items())


def resource_name(component: str, name: str) -> str:
    return f"{name}-{component}"


def build_manifests(
    component: str, spec: LocalComponent, name: str, namespace: str
) -> list[dict[str, Any]]:
    """Build the objects that install a component.

    Args:
        component: Component name (``etcd`` or ``apiserver``).
        spec: Desired local install.
        name: Control-plane instance name.
        namespace: Namespace to install into.

    Returns:
        List of Kubernetes objects, namespace first.

    Raises:
        ValueError: For an unknown component.
    """
    builders = {ETCD: _build_etcd, APISERVER: _build_apiserver}
    if component not in builders:
        raise ValueError(f"no manifests for component '{component}'")
    return [_build_namespace(namespace)] + builders[component](spec, name, namespace)


def _build_namespace(namespace: str) -> dict[str, Any]:
    return {
        "apiVersion": "v1",
        "kind": "Namespace",
        "metadata": {"name": namespace},
    }


def _pod_labels(component: str, spec: LocalComponent, name: str) -> dict[str, str]:
    labels = dict(spec.labels)
    labels.update(component_labels(component, name))
    return labels


def _build_etcd(spec: LocalComponent, name: str, namespace: str) -> list[dict[str, Any]]:
    """Build etcd StatefulSet and headless service."""
    svc_name = resource_name(ETCD, name)
    selector = component_labels(ETCD, name)
    initial_cluster = ",".join(
        f"{svc_name}-{i}=http://{svc_name}-{i}.{svc_name}.{namespace}.svc:{ETCD_PEER_PORT}"
        for i in range(spec.replicas)
    )
    pod_host = f"$(POD_NAME).{svc_name}.{namespace}.svc"
    etcd_args = [
        "exec etcd",
        "--name=$(POD_NAME)",
        "--data-dir=/var/lib/etcd",
        f"--listen-client-urls=http://0.0.0.0:{ETCD_CLIENT_PORT}",
        f"--listen-peer-urls=http://0.0.0.0:{ETCD_PEER_PORT}",
        f"--advertise-client-urls=http://{pod_host}:{ETCD_CLIENT_PORT}",
        f"--initial-advertise-peer-urls=http://{pod_host}:{ETCD_PEER_PORT}",
        f"--initial-cluster={initial_cluster}",
        "--initial-cluster-state=new",
        *spec.extra_args,
    ]

    statefulset = {
        "apiVersion": "apps/v1",
        "kind": "StatefulSet",
        "metadata": {"name": svc_name, "namespace": namespace, "labels": selector},
        "spec": {
            "replicas": spec.replicas,
            "serviceName": svc_name,
            "podManagementPolicy": "Parallel",
            "selector": {"matchLabels": selector},
            "template": {
                "metadata": {"labels": _pod_labels(ETCD, spec, name)},
                "spec": {
                    "containers": [
                        {
                            "name": "etcd",
                            "image": spec.image,
                            "command": ["/bin/sh", "-ec"],
                            "args": [" ".join(etcd_args)],
                            "env": [
                                {
                                    "name": "POD_NAME",
                                    "valueFrom": {"fieldRef": {"fieldPath": "metadata.name"}},
                                }
                            ],
                            "ports": [
                                {"name": "client", "containerPort": ETCD_CLIENT_PORT},
                                {"name": "peer", "containerPort": ETCD_PEER_PORT},
                            ],
                            "volumeMounts": [{"name": "data", "mountPath": "/var/lib/etcd"}],
                            "readinessProbe": {
                                "httpGet": {"path": "/health", "port": ETCD_CLIENT_PORT},
                                "initialDelaySeconds": 5,
                                "periodSeconds": 5,
                            },
                        }
                    ],
                    "volumes": [{"name": "data", "emptyDir": {}}],
                },
            },
        },
    }

    service = {
        "apiVersion": "v1",
        "kind": "Service",
        "metadata": {"name": svc_name, "namespace": namespace, "labels": selector},
        "spec": {
            "clusterIP": "None",
            "publishNotReadyAddresses": True,
            "selector": selector,
            "ports": [
                {"name": "client", "port": ETCD_CLIENT_PORT, "targetPort": ETCD_CLIENT_PORT},
                {"name": "peer", "port": ETCD_PEER_PORT, "targetPort": ETCD_PEER_PORT},
            ],
        },
    }

    return [statefulset, service]


def _build_apiserver(spec: LocalComponent, name: str, namespace: str) -> list[dict[str, Any]]:
    """Build apiserver deployment and service."""
    deploy_name = resource_name(APISERVER, name)
    etcd_url = f"http://{resource_name(ETCD, name)}.{namespace}.svc:{ETCD_CLIENT_PORT}"
    selector = component_labels(APISERVER, name)

    deployment = {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {"name": deploy_name, "namespace": namespace, "labels": selector},
        "spec": {
            "replicas": spec.replicas,
            "selector": {"matchLabels": selector},
            "template": {
                "metadata": {"labels": _pod_labels(APISERVER, spec, name)},
                "spec": {
                    "containers": [
                        {
                            "name": "kube-apiserver",
                            "image": spec.image,
                            "command": [
                                "kube-apiserver",
                                f"--etcd-servers={etcd_url}",
                                f"--secure-port={APISERVER_PORT}",
                                *spec.extra_args,
                            ],
                            "ports": [{"name": "https", "containerPort": APISERVER_PORT}],
                            "readinessProbe": {
                                "httpGet": {
                                    "path": "/readyz",
                                    "port": APISERVER_PORT,
                                    "scheme": "HTTPS",
                                },
                                "initialDelaySeconds": 15,
                                "periodSeconds": 10,
                            },
                        }
                    ],
                },
            },
        },
    }

    service = {
        "apiVersion": "v1",
        "kind": "Service",
        "metadata": {"name": deploy_name, "namespace": namespace, "labels": selector},
        "spec": {
            "selector": selector,
            "ports": [{"name": "https", "port": APISERVER_PORT, "targetPort": APISERVER_PORT}],
        },
    }

    return [deployment, service]
