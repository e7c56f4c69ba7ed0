import doctest
import importlib
import pkgutil

import pytest

import dynpack


def _iter_module_names():
    for module_info in pkgutil.walk_packages(dynpack.__path__, prefix='dynpack.'):
        yield module_info.name


@pytest.mark.parametrize('module_name', sorted(_iter_module_names()))
def test_docstring_examples(module_name):
    module = importlib.import_module(module_name)
    result = doctest.testmod(module, optionflags=doctest.ELLIPSIS)
    assert result.failed == 0
