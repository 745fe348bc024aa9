"""Locate and load a Python module containing model types."""
import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import Union

from pocometa.errors import ModuleLoadError

logger = logging.getLogger(__name__)

MODULE_EXTENSION = ".py"

# Marker set on modules this loader executed, so reloading them is allowed.
LOADED_MARKER = "__pocometa_loaded__"


def resolve_module_path(file_name: Union[str, Path]) -> Path:
    """
    Resolve the module file for a path given on the command line.

    The module extension is appended when the path does not already
    carry it: ``models`` becomes ``models.py`` and ``models.txt`` becomes
    ``models.txt.py``.
    """
    path = Path(file_name).expanduser().resolve()
    if path.suffix != MODULE_EXTENSION:
        return path.with_name(path.name + MODULE_EXTENSION)
    return path


def load_module(file_name: Union[str, Path]) -> ModuleType:
    """
    Execute a module file and return the module object.

    The module is registered in sys.modules under its file stem so that
    string annotations and forward references can be resolved later.

    Raises:
        ModuleLoadError: If the file is missing or fails to import
    """
    path = resolve_module_path(file_name)
    if not path.is_file():
        raise ModuleLoadError(path, "file not found")

    module_name = path.stem
    existing = sys.modules.get(module_name)
    if existing is not None and not getattr(existing, LOADED_MARKER, False):
        raise ModuleLoadError(
            path, f"module name '{module_name}' is already used by an imported module"
        )

    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ModuleLoadError(path, "not a loadable Python module")

    module = importlib.util.module_from_spec(spec)
    setattr(module, LOADED_MARKER, True)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        if existing is not None:
            sys.modules[module_name] = existing
        else:
            sys.modules.pop(module_name, None)
        raise ModuleLoadError(path, f"{type(e).__name__}: {e}") from e

    logger.info(f"Loaded module {module_name} from {path}")
    return module
