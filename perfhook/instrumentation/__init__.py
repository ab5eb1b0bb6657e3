"""Instrumentation module for PerfHook."""

from .base import InstrumentationBase, replace_method
from .registry import AppliedPatch, applied_patches, install_hooks, register_patch, uninstall_hooks

__all__ = [
    "InstrumentationBase",
    "replace_method",
    "register_patch",
    "install_hooks",
    "uninstall_hooks",
    "applied_patches",
    "AppliedPatch",
]
