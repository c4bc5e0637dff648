"""Shared fixtures: small JS/TS project trees written into tmp_path."""

from pathlib import Path

import pytest


def write_tree(root: Path, files: dict) -> Path:
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def make_project(tmp_path):
    def _make(files: dict) -> Path:
        return write_tree(tmp_path / "project", files)
    return _make


# E imports A and B, C imports E, A imports D.
SAMPLE_FILES = {
    "tsconfig.json": "{}",
    "package.json": '{"devDependencies": {"typescript": "^5.0.0"}}',
    "src/E.ts": (
        "import { a } from './A';\n"
        "import b from './B';\n"
        "import React from 'react';\n"
    ),
    "src/A.ts": "import { d } from './D';\nimport _ from 'lodash';\nexport const a = d;\n",
    "src/B.ts": "export default 1;\n",
    "src/C.ts": "import { e } from './E';\n",
    "src/D.ts": "export const d = 1;\n",
}


@pytest.fixture
def sample_project(make_project):
    return make_project(SAMPLE_FILES)
