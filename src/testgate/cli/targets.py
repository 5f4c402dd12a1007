"""Resolving ``module:Class`` command-line targets into test classes."""

from __future__ import annotations

import importlib
import inspect
import unittest
from collections.abc import Iterable

import click

__all__ = ["load_targets"]


def _is_test_class(candidate: object, module_name: str, prefix: str) -> bool:
    if not inspect.isclass(candidate) or candidate.__module__ != module_name:
        return False
    if issubclass(candidate, unittest.TestCase):
        return True
    return candidate.__name__.startswith("Test") or any(
        name.startswith(prefix) and callable(getattr(candidate, name))
        for name in vars(candidate)
    )


def load_targets(targets: Iterable[str], method_prefix: str = "test") -> list[type]:
    """Import the test classes named by ``targets``.

    A target is either ``package.module:ClassName`` or ``package.module``;
    the latter selects every class defined in the module that is a
    ``unittest.TestCase``, is named ``Test*``, or has test methods.

    Raises:
        click.BadParameter: If a module or class cannot be found.
    """
    classes: list[type] = []
    for target in targets:
        module_name, _, class_name = target.partition(":")
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise click.BadParameter(
                f"Cannot import module '{module_name}': {e}", param_hint="TARGET"
            ) from e

        if class_name:
            test_class = getattr(module, class_name, None)
            if not inspect.isclass(test_class):
                raise click.BadParameter(
                    f"'{class_name}' is not a class in {module_name}",
                    param_hint="TARGET",
                )
            classes.append(test_class)
            continue

        classes.extend(
            candidate
            for _, candidate in inspect.getmembers(module, inspect.isclass)
            if _is_test_class(candidate, module_name, method_prefix)
        )
    return classes
