import os, pathlib
import yaml
from pydantic import ValidationError

from .models import Settings, ConfigError, CollectionError, CodecError, CommandError
from .utils import LOG, flush_metrics
from . import kubeconfig, collector, codec, patcher, restart

DEFAULT_CONFIG = "deployinv-config.yaml"

MENU = """
Select an action:
1: Generate Kubernetes Deployment to CSV
2: Patch Kubernetes Spec from CSV
3: Restart All Deployment
4: Exit"""


def load_settings(path=None) -> Settings:
    explicit = path or os.getenv("DEPLOYINV_CONFIG")
    cfg_path = pathlib.Path(explicit or DEFAULT_CONFIG)
    if not cfg_path.exists():
        if explicit:
            raise ConfigError(f"config file {cfg_path} does not exist")
        return Settings()
    try:
        with open(cfg_path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        return Settings(**raw)
    except (OSError, yaml.YAMLError, ValidationError, TypeError) as e:
        raise ConfigError(f"invalid config file {cfg_path}: {e}") from e


def _ask(prompt=""):
    try:
        return input(prompt)
    except EOFError:
        return ""


def confirm() -> bool:
    answer = _ask("\n\nDo you want to proceed with running the script? (Y/N): ")
    return answer.strip().upper() == "Y"


def choose_action() -> str:
    print(MENU)
    return _ask().strip()


def export_inventory(settings: Settings) -> int:
    print("\n💥 Running the script...\n")
    ctx = kubeconfig.resolve()
    records = collector.collect(ctx)
    codec.write(records, settings.csv_path, delay=settings.progress_delay_seconds)
    print(f"\n✅ CSV file '{settings.csv_path}' created successfully.")
    return 0


def patch_from_file(settings: Settings) -> int:
    try:
        rows = codec.read(settings.csv_path)
    except CodecError as e:
        LOG.error("💢 Error updating Kubernetes specs: %s", e)
        return 1
    patcher.apply(rows, settings)
    return 0


def restart_all(settings: Settings) -> int:
    ctx = kubeconfig.resolve()
    try:
        restart.restart_all(settings, ctx.namespace)
    except CommandError as e:
        LOG.error("💢 kubectl rollout restart error: %s", e)
        return 1
    return 0


def exit_script(settings: Settings) -> int:
    print("\n💢 Exiting the script.")
    return 0


ACTIONS = {
    "1": export_inventory,
    "2": patch_from_file,
    "3": restart_all,
    "4": exit_script,
}


def run(settings: Settings) -> int:
    if not confirm():
        print("\n💢 Operation cancelled.")
        return 0

    action = ACTIONS.get(choose_action())
    if action is None:
        print("💢 Invalid choice, please select a valid action.")
        return 0
    try:
        return action(settings)
    except (ConfigError, CollectionError, CodecError) as e:
        LOG.error("💢 %s", e)
        return 1


def main() -> int:
    try:
        settings = load_settings()
    except ConfigError as e:
        LOG.error("💢 %s", e)
        return 1
    try:
        return run(settings)
    finally:
        flush_metrics(settings.metrics_textfile)


if __name__ == "__main__":
    raise SystemExit(main())
