import subprocess, json, shlex

from ..models import CommandError
from ..utils import LOG


def _kubectl(args:list[str], kubectl:str="kubectl"):
    cmd = [kubectl] + args
    LOG.info("💻 Executing command: %s", shlex.join(cmd))
    try:
        cp = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except OSError as e:
        raise CommandError(cmd, -1, str(e)) from e
    output = (cp.stdout or "") + (cp.stderr or "")
    if cp.returncode != 0:
        raise CommandError(cmd, cp.returncode, output)
    return output

def rollout_restart_all(namespace:str, kubectl:str="kubectl"):
    return _kubectl(["rollout", "restart", "deployment", "--all", "-n", namespace], kubectl)

def rollout_restart(namespace:str, name:str, kubectl:str="kubectl"):
    return _kubectl(["rollout", "restart", "deployment", name, "-n", namespace], kubectl)

def set_resources(namespace:str, name:str, cpu_request:str, memory_request:str, memory_limit:str,
                  kubectl:str="kubectl"):
    return _kubectl(["set", "resources", "deployment", name,
                     f"--namespace={namespace}",
                     f"--requests=cpu={cpu_request},memory={memory_request}",
                     f"--limits=memory={memory_limit}"], kubectl)

def merge_patch(kind:str, namespace:str, name:str, body:dict, kubectl:str="kubectl"):
    payload = json.dumps(body, separators=(",", ":"))
    return _kubectl(["patch", kind, name, f"--namespace={namespace}",
                     "--type=merge", "-p", payload], kubectl)
