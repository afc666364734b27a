"""
Flat-file persistence for the requirements registry.

The registry lives in a single JSON file: an object mapping each LRN to
the list of requirement names that student still owes. Neither function
here ever raises to the caller -- a broken or missing file falls back to
the built-in classroom dataset, and a failed write is logged while the
in-memory registry stays authoritative.
"""

import copy
import json
import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

# LRN -> outstanding requirements.
Registry = dict[str, list[str]]

# ---------------------------------------------------------------------------
# Built-in dataset
#
# Used on first start (no data file yet) or when the file can't be parsed.
# ---------------------------------------------------------------------------

DEFAULT_REGISTRY: Registry = {
    "0016": ["Pillowcase", "Marketing Pillowcase"],
    "0319": [],
    "0303": ["Circle Graph (Monthly Budget)"],
    "0097": ["Circle Graph (Monthly Budget)", "Project Plan (Pillowcase)", "Marketing Pillowcase"],
    "0315": ["Circle Graph (Monthly Budget)", "Project Plan (Pillowcase)", "Marketing Pillowcase"],
    "0009": ["Marketing Pillowcase"],
    "0086": ["Circle Graph (Monthly Budget)"],
    "0134": [],
    "0288": [
        "Circle Graph (Monthly Budget)",
        "Project Plan (Pillowcase)",
        "Pillowcase",
        "Marketing Pillowcase",
    ],
    "0051": ["Marketing Pillowcase"],
    "0021": ["Pillowcase"],
    "0089": [],
    "0313": ["Marketing Pillowcase"],
    "0004": [],
    "0135": ["Pillowcase", "Marketing Pillowcase"],
    "0075": [],
    "0061": [
        "Circle Graph (Monthly Budget)",
        "Project Plan (Pillowcase)",
        "Pillowcase",
        "Marketing Pillowcase",
    ],
    "0267": ["Collage (Family Resources)", "Marketing Pillowcase"],
    "0266": ["Collage (Family Resources)", "Project Plan (Pillowcase)", "Marketing Pillowcase"],
    "0103": ["Circle Graph (Monthly Budget)", "Marketing Pillowcase"],
}


def default_registry() -> Registry:
    """Fresh copy of the built-in dataset, safe to mutate."""
    return copy.deepcopy(DEFAULT_REGISTRY)


def load_registry(path: Path) -> Registry:
    """Read the registry from `path`, or fall back to the built-in dataset."""
    path = Path(path)
    if not path.exists():
        logger.info("No data file at %s, starting from the built-in dataset", path)
        return default_registry()

    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        logger.exception("Error reading data file %s", path)
        return default_registry()

    if not isinstance(data, dict):
        logger.error(
            "Data file %s holds a %s, expected an object -- using the built-in dataset",
            path, type(data).__name__,
        )
        return default_registry()

    logger.info("Loaded %d students from %s", len(data), path)
    return data


def save_registry(path: Path, registry: Registry) -> bool:
    """Overwrite `path` with the registry. Returns False if the write failed."""
    path = Path(path)
    payload = json.dumps(registry, indent=2, ensure_ascii=False)

    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        # Write next to the target, then swap it in, so readers never see
        # a half-written file.
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp",
        )
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError:
        logger.exception("Error saving data file %s", path)
        return False
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)

    return True
