"""
Run configuration.

Responsibility: loading YAML settings for scripts. Library functions take
their parameters explicitly and never read configuration themselves.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .segmented_sieve import SEGMENT_LEN

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "default.yaml"

DEFAULT_CONFIG: Dict[str, Any] = {
    "segment_len": SEGMENT_LEN,
    "limits": [10**6],
    "n_primes": [10**4],
    "check_limit": 10**6,
    "output_dir": "data/results",
}


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load settings from a YAML file on top of DEFAULT_CONFIG.

    Parameters
    ----------
    path : str or Path, optional
        YAML file to read. Defaults to config/default.yaml if it exists,
        otherwise DEFAULT_CONFIG is returned unchanged.

    Returns
    -------
    dict
        Merged settings. Keys not in DEFAULT_CONFIG are kept as-is.
    """
    config = dict(DEFAULT_CONFIG)

    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return config
        path = DEFAULT_CONFIG_PATH

    with open(path) as f:
        loaded = yaml.safe_load(f) or {}
    if not isinstance(loaded, dict):
        raise ValueError(f"{path}: expected a mapping, got {type(loaded).__name__}")
    config.update(loaded)

    segment_len = config["segment_len"]
    if isinstance(segment_len, bool) or not isinstance(segment_len, int) or segment_len < 1:
        raise ValueError(f"segment_len must be a positive integer, got {segment_len!r}")

    return config
