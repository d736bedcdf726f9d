"""
Run the usage examples embedded in module docstrings.
"""

import doctest
import importlib

import pytest

MODULES = [
    "htseqfilter.core.row",
    "htseqfilter.core.quality",
    "htseqfilter.core.statistics",
    "htseqfilter.core.summary",
    "htseqfilter.core.transform",
    "htseqfilter.quality",
    "htseqfilter.quality.filtering",
    "htseqfilter.io",
    "htseqfilter.io.loaders",
    "htseqfilter.io.writers",
    "htseqfilter.pipeline",
    "htseqfilter.cli.config",
]


@pytest.mark.parametrize("name", MODULES)
def test_module_examples(name):
    result = doctest.testmod(importlib.import_module(name))
    assert result.failed == 0
