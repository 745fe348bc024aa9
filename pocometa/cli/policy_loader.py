"""Load a policy given on the command line as 'module:Class'."""
import importlib
import logging
from pathlib import Path

from pocometa.errors import ModuleLoadError, PolicyLoadError
from pocometa.introspection.module_loader import load_module
from pocometa.policy.entity_policy import EntityPolicy

logger = logging.getLogger(__name__)


def load_policy(spec: str) -> EntityPolicy:
    """
    Create the policy named by spec.

    Args:
        spec: "package.module:ClassName" or "path/to/file.py:ClassName";
            empty for the default policy

    Returns:
        Policy instance (classes are instantiated without arguments)

    Raises:
        PolicyLoadError: If the module or attribute cannot be found
    """
    if not spec:
        return EntityPolicy()

    module_part, sep, attr = spec.rpartition(":")
    if not sep or not module_part or not attr:
        raise PolicyLoadError(f"Policy must be given as module:Class, got '{spec}'")

    if module_part.endswith(".py") or "/" in module_part or "\\" in module_part:
        try:
            module = load_module(Path(module_part))
        except ModuleLoadError as e:
            raise PolicyLoadError(f"Cannot load policy module: {e}") from e
    else:
        try:
            module = importlib.import_module(module_part)
        except ImportError as e:
            raise PolicyLoadError(f"Cannot import policy module {module_part}: {e}") from e

    policy = getattr(module, attr, None)
    if policy is None:
        raise PolicyLoadError(f"Policy {attr} not found in {module_part}")
    if isinstance(policy, type):
        policy = policy()

    logger.info(f"Using policy {type(policy).__name__}")
    return policy
