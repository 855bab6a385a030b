"""Loading handler classes from source directories."""

from __future__ import annotations

import hashlib
import importlib.util
import inspect
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import Iterable, Union

from .errors import ConfigurationError
from .handlers import HANDLER_BASES, Handler
from .router import Router

LOGGER = logging.getLogger(__name__)


def iter_handler_files(paths: Iterable[Union[str, Path]]) -> list[Path]:
    """Every ``*.py`` file below ``paths``, sorted per directory."""

    files: list[Path] = []
    for raw in paths:
        path = Path(raw).expanduser()
        if path.is_file():
            files.append(path)
            continue
        if not path.is_dir():
            LOGGER.warning("Handler path %s does not exist; skipping", path)
            continue
        files.extend(sorted(item for item in path.rglob("*.py") if item.name != "__init__.py"))
    return files


def load_module(path: Path) -> ModuleType:
    resolved = path.resolve()
    digest = hashlib.sha1(str(resolved).encode("utf-8")).hexdigest()[:12]
    module_name = f"socketbolt_handler_{resolved.stem}_{digest}"
    existing = sys.modules.get(module_name)
    if existing is not None:
        return existing
    spec = importlib.util.spec_from_file_location(module_name, resolved)
    if spec is None or spec.loader is None:
        raise ConfigurationError(f"Cannot load handler module {resolved}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        sys.modules.pop(module_name, None)
        raise
    return module


def handler_classes(module: ModuleType) -> list[type[Handler]]:
    """Concrete handler classes defined (not imported) in ``module``."""

    found = []
    for name, value in vars(module).items():
        if not inspect.isclass(value) or not issubclass(value, Handler):
            continue
        if value in HANDLER_BASES or name.startswith("_"):
            continue
        if value.__module__ != module.__name__:
            continue
        found.append(value)
    return found


def load_handlers(router: Router, paths: Iterable[Union[str, Path]]) -> int:
    """Import handler files under ``paths`` and register their classes.

    Returns the number of newly registered handlers.
    """

    before = router.handler_count
    for path in iter_handler_files(paths):
        module = load_module(path)
        for handler_cls in handler_classes(module):
            router.register(handler_cls)
            LOGGER.debug("Registered handler %s from %s", handler_cls.__name__, path)
    added = router.handler_count - before
    LOGGER.info("Loaded %s handlers", router.handler_count)
    return added
