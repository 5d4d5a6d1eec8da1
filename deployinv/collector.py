"""
Inventory of Deployments joined with the HPAs that target them.
"""
import math
from typing import List, Optional
from kubernetes.client.rest import ApiException
from urllib3.exceptions import HTTPError
from kubernetes.utils import parse_quantity

from .kubeconfig import ClusterContext
from .models import CollectionError, DeploymentRecord
from .utils import LOG

MIB = 1024 * 1024


def _millicores(quantity) -> int:
    if quantity is None:
        return 0
    return int(math.ceil(parse_quantity(quantity) * 1000))


def _mebibytes(quantity) -> int:
    if quantity is None:
        return 0
    return int(parse_quantity(quantity)) // MIB


def aggregate_resources(containers) -> dict:
    """Sum requests/limits over containers; unset values count as zero."""
    totals = {"cpu_request_m": 0, "cpu_limit_m": 0, "memory_request_mi": 0, "memory_limit_mi": 0}
    for c in containers or []:
        res = c.resources
        requests = (res.requests if res else None) or {}
        limits = (res.limits if res else None) or {}
        totals["cpu_request_m"] += _millicores(requests.get("cpu"))
        totals["cpu_limit_m"] += _millicores(limits.get("cpu"))
        totals["memory_request_mi"] += _mebibytes(requests.get("memory"))
        totals["memory_limit_mi"] += _mebibytes(limits.get("memory"))
    return totals


def rolling_update_fields(strategy) -> dict:
    fields = {"max_unavailable": "", "max_surge": ""}
    if strategy is None or strategy.type != "RollingUpdate" or strategy.rolling_update is None:
        return fields
    ru = strategy.rolling_update
    if ru.max_unavailable is not None:
        fields["max_unavailable"] = str(ru.max_unavailable)
    if ru.max_surge is not None:
        fields["max_surge"] = str(ru.max_surge)
    return fields


def find_hpa(hpas, deployment_name: str):
    # first match in listing order wins
    for hpa in hpas:
        ref = hpa.spec.scale_target_ref
        if ref.name == deployment_name and ref.kind == "Deployment":
            return hpa
    return None


def _cpu_target(metrics) -> int:
    target = 0
    for m in metrics or []:
        if m.type != "Resource" or m.resource is None:
            continue
        if m.resource.name == "cpu" and m.resource.target.average_utilization is not None:
            target = m.resource.target.average_utilization
    return target


def _stabilization(rules) -> Optional[int]:
    if rules is None:
        return None
    return rules.stabilization_window_seconds


def hpa_fields(hpa) -> dict:
    spec = hpa.spec
    behavior = spec.behavior
    return {
        "min_replicas": spec.min_replicas if spec.min_replicas is not None else 1,
        "max_replicas": spec.max_replicas,
        "cpu_target_utilization": _cpu_target(spec.metrics),
        "scale_up_stabilization": _stabilization(behavior.scale_up) if behavior else None,
        "scale_down_stabilization": _stabilization(behavior.scale_down) if behavior else None,
    }


def build_record(deploy, hpas) -> DeploymentRecord:
    fields = {
        "name": deploy.metadata.name,
        "namespace": deploy.metadata.namespace,
        "replicas": deploy.spec.replicas or 0,
    }
    fields.update(aggregate_resources(deploy.spec.template.spec.containers))
    fields.update(rolling_update_fields(deploy.spec.strategy))
    hpa = find_hpa(hpas, deploy.metadata.name)
    if hpa is not None:
        fields.update(hpa_fields(hpa))
    return DeploymentRecord(**fields)


def collect(ctx: ClusterContext, namespace: Optional[str] = None) -> List[DeploymentRecord]:
    """
    List Deployments and HPAs in the namespace and flatten them into records.

    Args:
        ctx: resolved cluster context
        namespace: namespace to inventory, defaults to the context's namespace

    Returns:
        One record per Deployment, in listing order

    Raises:
        CollectionError: if either listing fails
    """
    namespace = namespace or ctx.namespace
    try:
        deployments = ctx.apps.list_namespaced_deployment(namespace=namespace)
    except (ApiException, HTTPError) as e:
        raise CollectionError(f"failed to list deployments: {e}") from e
    try:
        hpas = ctx.autoscaling.list_namespaced_horizontal_pod_autoscaler(namespace=namespace)
    except (ApiException, HTTPError) as e:
        raise CollectionError(f"failed to list HPAs: {e}") from e

    LOG.info("Retrieved %d deployments and %d HPAs from namespace %s",
             len(deployments.items), len(hpas.items), namespace)
    return [build_record(d, hpas.items) for d in deployments.items]
