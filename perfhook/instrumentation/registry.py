"""Import hooks that patch HTTP client modules and remember how to undo it.

Instrumentations register a patch function per module name. ``install_hooks``
patches modules that are already imported and adds a meta path finder that
patches the rest when they are first imported. Each patch function returns a
callable that restores the module, so ``uninstall_hooks`` can put every
client back the way it found it.
"""

import importlib.abc
import importlib.machinery
import logging
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from types import ModuleType
from typing import Callable, Optional
from typing_extensions import override

logger = logging.getLogger(__name__)

RestoreFn = Callable[[], None]
PatchFn = Callable[[ModuleType], Optional[RestoreFn]]


@dataclass(frozen=True)
class PatchRegistration:
    module_name: str
    owner: str
    patch_fn: PatchFn


@dataclass(frozen=True)
class AppliedPatch:
    """A patch that has been applied to an imported module."""

    module_name: str
    owner: str
    restore: Optional[RestoreFn] = None


_registrations: dict[str, PatchRegistration] = {}
_applied: dict[str, AppliedPatch] = {}
_finder: Optional["_PatchOnImportFinder"] = None


def register_patch(module_name: str, patch_fn: PatchFn, owner: Optional[str] = None) -> None:
    """Register ``patch_fn`` for ``module_name``, replacing any earlier registration."""
    _registrations[module_name] = PatchRegistration(
        module_name=module_name,
        owner=owner or getattr(patch_fn, "__qualname__", repr(patch_fn)),
        patch_fn=patch_fn,
    )


def install_hooks() -> None:
    """Patch registered modules now if already imported, otherwise when they are imported."""
    global _finder
    if _finder is None:
        _finder = _PatchOnImportFinder()
        sys.meta_path.insert(0, _finder)

    for module_name in list(_registrations):
        module = sys.modules.get(module_name)
        if module is not None:
            _apply_patch(module)


def uninstall_hooks() -> list[str]:
    """Remove the import hook, undo applied patches and forget registrations.

    Returns the names of the modules that were restored.
    """
    global _finder
    if _finder is not None:
        if _finder in sys.meta_path:
            sys.meta_path.remove(_finder)
        _finder = None

    restored = []
    for applied in reversed(list(_applied.values())):
        if applied.restore is None:
            logger.debug(f"{applied.owner} left no way to restore {applied.module_name}")
            continue
        try:
            applied.restore()
        except Exception as e:
            logger.warning(f"Failed to restore {applied.module_name} patched by {applied.owner}: {e}")
            continue
        restored.append(applied.module_name)

    _applied.clear()
    _registrations.clear()
    return restored


def applied_patches() -> list[AppliedPatch]:
    """Patches currently applied, in the order they were applied."""
    return list(_applied.values())


class _PatchOnImportLoader(importlib.abc.Loader):
    def __init__(self, loader: importlib.abc.Loader) -> None:
        self._loader = loader

    @override
    def create_module(self, spec: importlib.machinery.ModuleSpec):
        return self._loader.create_module(spec)

    @override
    def exec_module(self, module: ModuleType) -> None:
        self._loader.exec_module(module)
        _apply_patch(module)


class _PatchOnImportFinder(importlib.abc.MetaPathFinder):
    @override
    def find_spec(
        self,
        fullname: str,
        path: Sequence[str] | None,
        target: ModuleType | None = None,
    ):
        if fullname not in _registrations or fullname in _applied:
            return None

        spec = importlib.machinery.PathFinder.find_spec(fullname, path)
        if not spec or not spec.loader:
            return None

        spec.loader = _PatchOnImportLoader(spec.loader)
        return spec


def _apply_patch(module: ModuleType) -> Optional[AppliedPatch]:
    registration = _registrations.get(module.__name__)
    if registration is None:
        return None

    applied = _applied.get(registration.module_name)
    if applied is not None:
        return applied

    try:
        restore = registration.patch_fn(module)
    except Exception as e:
        logger.error(f"Failed to instrument {module.__name__}: {e}")
        return None

    applied = AppliedPatch(module_name=registration.module_name, owner=registration.owner, restore=restore)
    _applied[registration.module_name] = applied
    return applied
