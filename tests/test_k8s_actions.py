import json
import logging
import pytest
from unittest.mock import patch

from deployinv.actions import k8s as k8s_act
from deployinv.models import CommandError


class _Proc:
    def __init__(self, returncode=0, stdout="", stderr=""):
        self.returncode, self.stdout, self.stderr = returncode, stdout, stderr


@patch("deployinv.actions.k8s.subprocess.run", return_value=_Proc(stdout="restarted\n"))
def test_restart_all_argv(run):
    out = k8s_act.rollout_restart_all("team-a")
    run.assert_called_once_with(
        ["kubectl", "rollout", "restart", "deployment", "--all", "-n", "team-a"],
        capture_output=True, text=True, check=False,
    )
    assert out == "restarted\n"


@patch("deployinv.actions.k8s.subprocess.run", return_value=_Proc())
def test_restart_one_argv(run):
    k8s_act.rollout_restart("team-a", "api", kubectl="oc")
    assert run.call_args.args[0] == ["oc", "rollout", "restart", "deployment", "api", "-n", "team-a"]


@patch("deployinv.actions.k8s.subprocess.run", return_value=_Proc())
def test_merge_patch_sends_compact_json(run):
    k8s_act.merge_patch("hpa", "team-a", "api", {"spec": {"minReplicas": 2}})
    argv = run.call_args.args[0]
    assert argv[:7] == ["kubectl", "patch", "hpa", "api", "--namespace=team-a", "--type=merge", "-p"]
    assert argv[7] == '{"spec":{"minReplicas":2}}'
    assert json.loads(argv[7]) == {"spec": {"minReplicas": 2}}


@patch("deployinv.actions.k8s.subprocess.run",
       return_value=_Proc(returncode=1, stdout="partial\n", stderr="error: not found\n"))
def test_non_zero_exit_raises_with_combined_output(run):
    with pytest.raises(CommandError) as exc:
        k8s_act.set_resources("team-a", "api", "100m", "64Mi", "128Mi")
    err = exc.value
    assert err.returncode == 1
    assert err.output == "partial\nerror: not found\n"
    assert err.cmd[:4] == ["kubectl", "set", "resources", "deployment"]
    assert "not found" in str(err)


@patch("deployinv.actions.k8s.subprocess.run", return_value=_Proc())
def test_command_is_logged_before_running(run, caplog):
    caplog.set_level(logging.INFO, logger="deployinv")
    k8s_act.rollout_restart_all("team-a")
    assert "Executing command: kubectl rollout restart deployment --all -n team-a" in caplog.text


def test_missing_binary_raises_command_error(tmp_path):
    missing = str(tmp_path / "no-such-kubectl")
    with pytest.raises(CommandError) as exc:
        k8s_act.rollout_restart_all("team-a", kubectl=missing)
    assert exc.value.returncode == -1
    assert exc.value.cmd[0] == missing
