"""
Resolve the active kube context into API clients and a namespace.
"""
import os
import yaml
from dataclasses import dataclass
from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException

from .models import ConfigError
from .utils import LOG

DEFAULT_NAMESPACE = "default"


@dataclass(frozen=True)
class ClusterContext:
    """API handles and namespace, resolved once per run and only read afterwards."""
    apps: client.AppsV1Api
    autoscaling: client.AutoscalingV2Api
    namespace: str
    context_name: str


def kubeconfig_path() -> str:
    return os.path.join(os.getenv("HOME", ""), ".kube", "config")


def active_namespace(path: str) -> tuple[str, str]:
    """
    Return (context name, namespace) of the current context in `path`.

    A context without a namespace maps to "default", the same as kubectl.
    """
    try:
        _, current = config.list_kube_config_contexts(config_file=path)
    except (ConfigException, OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load kubeconfig {path}: {e}") from e
    if not current or "context" not in current:
        raise ConfigError(f"Current context not found in kubeconfig {path}")
    namespace = (current.get("context") or {}).get("namespace") or DEFAULT_NAMESPACE
    return current["name"], namespace


def resolve(path: str | None = None) -> ClusterContext:
    path = path or kubeconfig_path()
    if not os.path.isfile(path):
        raise ConfigError(f"Failed to load kubeconfig: {path} does not exist")

    context_name, namespace = active_namespace(path)
    try:
        api_client = config.new_client_from_config(config_file=path, context=context_name)
    except (ConfigException, OSError, ValueError) as e:
        raise ConfigError(f"Failed to create Kubernetes client: {e}") from e

    LOG.info("✅ Kubernetes client ready for context %s, namespace %s", context_name, namespace)
    return ClusterContext(
        apps=client.AppsV1Api(api_client),
        autoscaling=client.AutoscalingV2Api(api_client),
        namespace=namespace,
        context_name=context_name,
    )
