import logging, os, sys
from prometheus_client import CollectorRegistry, Counter, write_to_textfile

LOG = logging.getLogger("deployinv")
logging.basicConfig(stream=sys.stdout, level=os.getenv("LOG_LEVEL","INFO"),
                    format="%(asctime)s %(levelname)s %(message)s")

REGISTRY = CollectorRegistry()
ROWS_EXPORTED = Counter('deployinv_rows_exported','deployment rows written to the export file',
                        registry=REGISTRY)
PATCH_ACTIONS = Counter('deployinv_patch_actions','kubectl patch legs run from the export file',
                        ['action','result'], registry=REGISTRY)
RESTARTS = Counter('deployinv_restarts','rollout restarts requested', ['result'], registry=REGISTRY)


def flush_metrics(path):
    if not path:
        return
    try:
        write_to_textfile(path, REGISTRY)
        LOG.debug("metrics written to %s", path)
    except OSError as e:
        LOG.warning("could not write metrics to %s: %s", path, e)
