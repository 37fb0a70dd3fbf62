"""Classification policy loading for autoarrange.

A policy file uses the same shape as the serialized policy::

    {
      "fileCategories": {"文档类": {"extensions": [".pdf"], "color": "#4472C4",
                                   "description": "..."}},
      "sizeCategories": {"小": {"min": 0, "max": 1048576},
                         "大": {"min": 1048576, "max": -1}},
      "excludePaths": ["node_modules"],
      "scanPaths": ["~/Desktop"]
    }

Key order is significant in both tables.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from autoarrange.categories import DEFAULT_POLICY
from autoarrange.errors import ConfigurationInvalid
from autoarrange.models import ClassificationPolicy

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "AUTOARRANGE_CONFIG"


def parse_policy(data: Any) -> ClassificationPolicy:
    """
    Validate raw policy data.

    Args:
        data: Decoded JSON object

    Returns:
        Validated, immutable policy

    Raises:
        ConfigurationInvalid: If the data is not a valid policy
    """
    if not isinstance(data, dict):
        raise ConfigurationInvalid(f"policy must be a JSON object, got {type(data).__name__}")

    try:
        return ClassificationPolicy.model_validate(data)
    except ValidationError as e:
        raise ConfigurationInvalid(f"invalid classification policy: {e}") from e


def load_policy(path: Optional[Path] = None) -> ClassificationPolicy:
    """
    Load the classification policy.

    Uses ``path`` if given, then the AUTOARRANGE_CONFIG environment variable,
    then the built-in default policy.

    Raises:
        ConfigurationInvalid: If the chosen file is missing or malformed
    """
    if path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if not env_path:
            logger.debug("Using built-in classification policy")
            return DEFAULT_POLICY
        path = Path(env_path)

    path = Path(os.path.expanduser(str(path)))
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigurationInvalid(f"policy file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationInvalid(f"policy file {path} is not valid JSON: {e}") from e
    except OSError as e:
        raise ConfigurationInvalid(f"cannot read policy file {path}: {e}") from e

    policy = parse_policy(data)
    logger.debug("Loaded classification policy from %s", path)
    return policy


def export_policy(policy: ClassificationPolicy) -> str:
    """Serialize a policy in the file format accepted by load_policy."""
    return policy.model_dump_json(by_alias=True, indent=2)
