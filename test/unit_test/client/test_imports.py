"""The client package must stay importable without the server package."""

import ast
from pathlib import Path

import pytest

import affine_cloud.client

CLIENT_MODULES = sorted(Path(affine_cloud.client.__file__).parent.glob("*.py"))


def imported_modules(path: Path):
    for node in ast.walk(ast.parse(path.read_text(encoding="utf-8"))):
        if isinstance(node, ast.ImportFrom) and node.module:
            yield node.module
        elif isinstance(node, ast.Import):
            yield from (alias.name for alias in node.names)


@pytest.mark.parametrize("path", CLIENT_MODULES, ids=lambda path: path.name)
def test_client_does_not_import_server(path):
    assert not [module for module in imported_modules(path) if module.startswith("affine_cloud.server")]
