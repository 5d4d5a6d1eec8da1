from .actions import k8s as k8s_act
from .models import CommandError, Settings
from .utils import LOG, RESTARTS


def restart_all(settings: Settings, namespace: str) -> None:
    try:
        k8s_act.rollout_restart_all(namespace, kubectl=settings.kubectl)
    except CommandError:
        RESTARTS.labels("failed").inc()
        raise
    RESTARTS.labels("ok").inc()
    LOG.info("✅ All deployments restarted in namespace %s", namespace)


def restart_deployment(settings: Settings, namespace: str, name: str) -> None:
    try:
        k8s_act.rollout_restart(namespace, name, kubectl=settings.kubectl)
    except CommandError:
        RESTARTS.labels("failed").inc()
        raise
    RESTARTS.labels("ok").inc()
    LOG.info("✅ Rollout restarted for deployment %s in namespace %s", name, namespace)
