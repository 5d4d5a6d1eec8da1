"""
Pipe-delimited export file: one header row, then one numbered row per deployment.
"""
import csv
import time
from typing import Iterable, List, Sequence
from tqdm import tqdm

from .models import CodecError, DeploymentRecord, PatchRow
from .utils import LOG, ROWS_EXPORTED

DELIMITER = "|"
NOT_SET = "N/A"

HEADER = [
    "No", "Deployment Name", "Namespace", "Replicas",
    "CPU Request", "CPU Limit", "Memory Request", "Memory Limit",
    "MaxUnavailable", "MaxSurge", "Min Replicas", "Max Replicas",
    "CPU Target Utilization", "ScaleUp Stabilization", "ScaleDown Stabilization",
    "UpdateResourceAndHPA", "UpdateHPAOnly",
]

# PatchRow field for each header column, same order
FIELDS = [
    "no", "name", "namespace", "replicas",
    "cpu_request", "cpu_limit", "memory_request", "memory_limit",
    "max_unavailable", "max_surge", "min_replicas", "max_replicas",
    "cpu_target_utilization", "scale_up_stabilization", "scale_down_stabilization",
    "update_resource_and_hpa", "update_hpa_only",
]


def _optional(value) -> str:
    return NOT_SET if value is None else str(value)


def to_row(index: int, rec: DeploymentRecord) -> List[str]:
    return [
        str(index),
        rec.name,
        rec.namespace,
        str(rec.replicas),
        rec.cpu_request,
        rec.cpu_limit,
        rec.memory_request,
        rec.memory_limit,
        rec.max_unavailable,
        rec.max_surge,
        str(rec.min_replicas),
        str(rec.max_replicas),
        str(rec.cpu_target_utilization),
        _optional(rec.scale_up_stabilization),
        _optional(rec.scale_down_stabilization),
        # intent flags are only ever set by hand-editing the file
        "false",
        "false",
    ]


def write(records: Sequence[DeploymentRecord], path: str, delay: float = 0.0) -> None:
    """Create or overwrite `path` with the header and one row per record."""
    try:
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f, delimiter=DELIMITER, lineterminator="\n")
            writer.writerow(HEADER)
            with tqdm(total=len(records), desc="Writing", unit="row", leave=True) as bar:
                for i, rec in enumerate(records, start=1):
                    writer.writerow(to_row(i, rec))
                    ROWS_EXPORTED.inc()
                    bar.update(1)
                    if delay:
                        time.sleep(delay)
    except OSError as e:
        raise CodecError(f"failed to write {path}: {e}") from e
    LOG.info("Wrote %d rows to %s", len(records), path)


def parse(lines: Iterable[str], source: str = "<input>") -> List[PatchRow]:
    reader = csv.reader(lines, delimiter=DELIMITER)
    header = next(reader, None)
    if header is None:
        raise CodecError(f"{source}: file is empty, expected a header row")
    if [h.strip() for h in header] != HEADER:
        raise CodecError(f"{source}: unexpected header {DELIMITER.join(header)!r}, "
                         f"expected {DELIMITER.join(HEADER)!r}")

    rows = []
    for values in reader:
        if not values:
            continue
        line = reader.line_num
        if len(values) != len(HEADER):
            raise CodecError(f"{source}:{line}: expected {len(HEADER)} columns, got {len(values)}")
        rows.append(PatchRow(line=line, **dict(zip(FIELDS, values))))
    return rows


def read(path: str) -> List[PatchRow]:
    """
    Read an export file back into rows keyed by column name.

    The header must match exactly and every row must have the same number
    of columns; the whole read fails otherwise.
    """
    try:
        with open(path, newline="", encoding="utf-8-sig") as f:
            rows = parse(f, source=path)
    except OSError as e:
        raise CodecError(f"failed to open {path}: {e}") from e
    except csv.Error as e:
        raise CodecError(f"{path}: {e}") from e
    LOG.info("Read %d rows from %s", len(rows), path)
    return rows
