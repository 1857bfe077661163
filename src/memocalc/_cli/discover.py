"""Importing expression trees from scripts and modules."""

from __future__ import annotations

import importlib
import importlib.util
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from memocalc._node import Node

if TYPE_CHECKING:
    from types import ModuleType

    from .config import ExpressionRef

logger = logging.getLogger(__name__)


class DiscoveryError(Exception):
    """An expression tree could not be loaded."""


def _import_script(path: Path) -> ModuleType:
    path = path.resolve()
    if not path.is_file():
        msg = f"Script not found: {path}"
        raise DiscoveryError(msg)

    module_name = f"_memocalc_script_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        msg = f"Cannot import {path}"
        raise DiscoveryError(msg)
    module = importlib.util.module_from_spec(spec)
    # Scripts may import their sibling modules
    if str(path.parent) not in sys.path:
        sys.path.insert(0, str(path.parent))
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except (ImportError, SyntaxError) as e:
        del sys.modules[module_name]
        msg = f"Cannot import {path}: {e}"
        raise DiscoveryError(msg) from e
    return module


def _import_module(name: str) -> ModuleType:
    try:
        return importlib.import_module(name)
    except ImportError as e:
        msg = f"Cannot import module '{name}': {e}"
        raise DiscoveryError(msg) from e


def load_expression(ref: ExpressionRef) -> Node:
    """Import the module `ref` points at and return its expression tree.

    Raises:
        DiscoveryError: If the module cannot be imported, the variable is
            missing or is not a Node, or no Node is found.

    """
    if isinstance(ref.target, Path):
        module = _import_script(ref.target)
    else:
        module = _import_module(ref.target)

    if ref.name is not None:
        tree = getattr(module, ref.name, None)
        if tree is None:
            msg = f"No variable '{ref.name}' in {ref.target}"
            raise DiscoveryError(msg)
        if not isinstance(tree, Node):
            msg = f"'{ref.name}' in {ref.target} is a {type(tree).__name__}, not an expression Node"
            raise DiscoveryError(msg)
        return tree

    for attr, value in vars(module).items():
        if not attr.startswith("_") and isinstance(value, Node):
            logger.debug("Using expression '%s' from %s", attr, ref.target)
            return value

    msg = f"No expression Node in {ref.target}, name one with --name or 'target:variable'"
    raise DiscoveryError(msg)
