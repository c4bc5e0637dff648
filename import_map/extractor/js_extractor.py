"""JavaScript/TypeScript import extraction using regex patterns.

This is a heuristic layer, not a parser. Sources that are not string
literals (``import(name)``, template literals with ``${}``) and statement
shapes the patterns below do not anticipate are not extracted.
"""

from __future__ import annotations

import re

from import_map.extractor.base import BaseImportExtractor
from import_map.models import ImportKind

_SOURCE = r"""(?P<q>['"`])(?P<src>[^'"`\n]+)(?P=q)"""

# Order matters: when two patterns capture the same literal, the first wins.
_PATTERNS: tuple[tuple[re.Pattern[str], ImportKind], ...] = (
    # const Page = lazy(() => import('./Page'))
    (re.compile(
        r"\b(?:lazy|defineAsyncComponent|loadable)\s*\(\s*(?:async\s*)?\(\s*\)\s*=>\s*"
        r"import\s*\(\s*" + _SOURCE + r"\s*\)"
    ), ImportKind.DYNAMIC_IMPORT),
    # await import('./module')
    (re.compile(r"(?<![\w$.])import\s*\(\s*" + _SOURCE + r"\s*\)"), ImportKind.DYNAMIC_IMPORT),
    # import { a, b as c } from './utils'  /  import React, { useState } from 'react'
    (re.compile(
        r"\bimport\s*(?:type\s+)?(?:[\w$]+\s*,\s*)?\{[^}]*\}\s*from\s*" + _SOURCE
    ), ImportKind.IMPORT),
    # import * as fs from 'fs'
    (re.compile(
        r"\bimport\s*(?:type\s+)?(?:[\w$]+\s*,\s*)?\*\s*as\s+[\w$]+\s+from\s*" + _SOURCE
    ), ImportKind.IMPORT),
    # import express from 'express'
    (re.compile(r"\bimport\s+(?:type\s+)?[\w$]+\s+from\s*" + _SOURCE), ImportKind.IMPORT),
    # import './style.css'
    (re.compile(r"\bimport\s*" + _SOURCE), ImportKind.IMPORT),
    # export { a } from './a'  /  export * from './b'
    (re.compile(
        r"\bexport\s+(?:type\s+)?(?:\*(?:\s*as\s+[\w$]+)?|\{[^}]*\})\s*from\s*" + _SOURCE
    ), ImportKind.IMPORT),
    # const { a } = require('./a')
    (re.compile(
        r"\b(?:const|let|var)\s+[^=;]+?=\s*require\s*\(\s*" + _SOURCE + r"\s*\)"
    ), ImportKind.REQUIRE),
    # require('./polyfill')
    (re.compile(r"(?<![\w$.])require\s*\(\s*" + _SOURCE + r"\s*\)"), ImportKind.REQUIRE),
)


class RegexImportExtractor(BaseImportExtractor):

    def extract(self, text: str) -> list[tuple[str, ImportKind]]:
        found: dict[int, tuple[str, ImportKind]] = {}
        for pattern, kind in _PATTERNS:
            for m in pattern.finditer(text):
                source = m.group("src").strip()
                if not source or "${" in source:
                    continue
                # one statement per literal position
                found.setdefault(m.start("src"), (source, kind))
        return [found[offset] for offset in sorted(found)]
