"""
Push hand-edited rows of the export file back onto the cluster with kubectl.
"""
from typing import Optional, Sequence

from .actions import k8s as k8s_act
from .codec import NOT_SET
from .models import CommandError, PatchRow, Settings
from .utils import LOG, PATCH_ACTIONS


def _int_field(row: PatchRow, field: str) -> int:
    raw = getattr(row, field).strip()
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{field} must be an integer, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{field} must not be negative, got {value}")
    return value


def _window(row: PatchRow, field: str) -> Optional[int]:
    raw = getattr(row, field).strip()
    if not raw or raw.upper() == NOT_SET:
        return None
    return _int_field(row, field)


def _int_or_percent(raw: str):
    raw = raw.strip()
    return int(raw) if raw.isdigit() else raw


def hpa_patch(row: PatchRow) -> dict:
    """Merge patch for the HPA spec; absent stabilization windows are left out."""
    spec = {
        "minReplicas": _int_field(row, "min_replicas"),
        "maxReplicas": _int_field(row, "max_replicas"),
        "metrics": [{
            "type": "Resource",
            "resource": {
                "name": "cpu",
                "target": {"type": "Utilization",
                           "averageUtilization": _int_field(row, "cpu_target_utilization")},
            },
        }],
    }
    behavior = {}
    up = _window(row, "scale_up_stabilization")
    down = _window(row, "scale_down_stabilization")
    if up is not None:
        behavior["scaleUp"] = {"stabilizationWindowSeconds": up}
    if down is not None:
        behavior["scaleDown"] = {"stabilizationWindowSeconds": down}
    if behavior:
        spec["behavior"] = behavior
    return {"spec": spec}


def rolling_update_patch(row: PatchRow) -> Optional[dict]:
    rolling = {}
    if row.max_unavailable.strip():
        rolling["maxUnavailable"] = _int_or_percent(row.max_unavailable)
    if row.max_surge.strip():
        rolling["maxSurge"] = _int_or_percent(row.max_surge)
    if not rolling:
        return None
    return {"spec": {"strategy": {"type": "RollingUpdate", "rollingUpdate": rolling}}}


def set_deployment_resources(row: PatchRow, settings: Settings) -> None:
    k8s_act.set_resources(row.namespace, row.name, row.cpu_request.strip(),
                          row.memory_request.strip(), row.memory_limit.strip(),
                          kubectl=settings.kubectl)
    LOG.info("✅ Resources updated for deployment %s", row.name)

    body = rolling_update_patch(row)
    if body is None:
        LOG.info("No maxUnavailable/maxSurge set for %s, rolling update left unchanged", row.name)
        return
    k8s_act.merge_patch("deployment", row.namespace, row.name, body, kubectl=settings.kubectl)
    LOG.info("✅ Rolling update patched for deployment %s", row.name)


def patch_hpa(row: PatchRow, settings: Settings) -> None:
    # the HPA is expected to share the deployment's name
    k8s_act.merge_patch("hpa", row.namespace, row.name, hpa_patch(row), kubectl=settings.kubectl)
    LOG.info("✅ HPA patched for %s", row.name)


def _run_leg(action: str, fn, row: PatchRow, settings: Settings) -> bool:
    try:
        fn(row, settings)
    except (CommandError, ValueError) as e:
        PATCH_ACTIONS.labels(action, "failed").inc()
        LOG.warning("💢 %s failed for deployment %s (line %d): %s", action, row.name, row.line, e)
        return False
    PATCH_ACTIONS.labels(action, "ok").inc()
    return True


def apply_row(row: PatchRow, settings: Settings) -> None:
    if row.wants_resource_and_hpa:
        _run_leg("set_resources", set_deployment_resources, row, settings)
        _run_leg("patch_hpa", patch_hpa, row, settings)
    elif row.wants_hpa_only:
        _run_leg("patch_hpa", patch_hpa, row, settings)


def apply(rows: Sequence[PatchRow], settings: Settings) -> None:
    """Apply every flagged row; a failing row is reported and skipped."""
    for row in rows:
        apply_row(row, settings)
    LOG.info("✅ Kubernetes specs updated successfully!")
