"""YANG schema loading (pyang-backed)."""

from .loader import YangModules, YangError, SchemaEntry

__all__ = ["YangModules", "YangError", "SchemaEntry"]
