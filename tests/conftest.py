"""
Test fixtures: fake kubernetes model objects and a fake cluster context.
"""
import pytest
from types import SimpleNamespace
from unittest.mock import MagicMock

from deployinv.kubeconfig import ClusterContext
from deployinv.models import Settings


def make_container(requests=None, limits=None, name="app"):
    return SimpleNamespace(name=name, resources=SimpleNamespace(requests=requests, limits=limits))


def make_deployment(name, namespace="team-a", replicas=1, containers=None,
                    strategy_type="RollingUpdate", max_unavailable=None, max_surge=None,
                    rolling_update=True):
    ru = None
    if rolling_update:
        ru = SimpleNamespace(max_unavailable=max_unavailable, max_surge=max_surge)
    return SimpleNamespace(
        metadata=SimpleNamespace(name=name, namespace=namespace),
        spec=SimpleNamespace(
            replicas=replicas,
            strategy=SimpleNamespace(type=strategy_type, rolling_update=ru),
            template=SimpleNamespace(spec=SimpleNamespace(containers=containers or [make_container()])),
        ),
    )


def cpu_metric(utilization):
    return SimpleNamespace(
        type="Resource",
        resource=SimpleNamespace(name="cpu", target=SimpleNamespace(average_utilization=utilization)),
    )


def memory_metric(utilization):
    return SimpleNamespace(
        type="Resource",
        resource=SimpleNamespace(name="memory", target=SimpleNamespace(average_utilization=utilization)),
    )


def make_hpa(target, min_replicas=None, max_replicas=5, metrics=None, behavior=None,
             kind="Deployment", name=None):
    return SimpleNamespace(
        metadata=SimpleNamespace(name=name or target),
        spec=SimpleNamespace(
            scale_target_ref=SimpleNamespace(name=target, kind=kind),
            min_replicas=min_replicas,
            max_replicas=max_replicas,
            metrics=metrics,
            behavior=behavior,
        ),
    )


def make_behavior(scale_up=None, scale_down=None):
    up = SimpleNamespace(stabilization_window_seconds=scale_up) if scale_up is not None else None
    down = SimpleNamespace(stabilization_window_seconds=scale_down) if scale_down is not None else None
    return SimpleNamespace(scale_up=up, scale_down=down)


@pytest.fixture
def fake_ctx():
    def _build(deployments=(), hpas=(), namespace="team-a"):
        apps = MagicMock()
        apps.list_namespaced_deployment.return_value = SimpleNamespace(items=list(deployments))
        autoscaling = MagicMock()
        autoscaling.list_namespaced_horizontal_pod_autoscaler.return_value = SimpleNamespace(items=list(hpas))
        return ClusterContext(apps=apps, autoscaling=autoscaling, namespace=namespace, context_name="test")
    return _build


@pytest.fixture
def settings(tmp_path):
    return Settings(csv_path=str(tmp_path / "deployment-info.csv"), progress_delay_seconds=0)


@pytest.fixture
def kubeconfig_file(tmp_path):
    def _write(current="dev", namespace="team-a", home=None):
        home = home or tmp_path
        kube_dir = home / ".kube"
        kube_dir.mkdir(parents=True, exist_ok=True)
        ctx = {"cluster": "dev-cluster", "user": "dev-user"}
        ns_line = f"    namespace: {namespace}\n" if namespace else ""
        path = kube_dir / "config"
        path.write_text(
            "apiVersion: v1\n"
            "kind: Config\n"
            f"current-context: {current}\n"
            "clusters:\n"
            "- name: dev-cluster\n"
            "  cluster:\n"
            "    server: https://127.0.0.1:6443\n"
            "contexts:\n"
            "- name: dev\n"
            "  context:\n"
            f"    cluster: {ctx['cluster']}\n"
            f"    user: {ctx['user']}\n"
            f"{ns_line}"
            "users:\n"
            "- name: dev-user\n"
            "  user:\n"
            "    token: not-a-real-token\n",
            encoding="utf-8",
        )
        return path
    return _write
