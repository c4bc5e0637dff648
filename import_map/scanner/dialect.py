"""Project dialect detection.

The dialect decides which extensions a scan treats as analysable. It is
computed once per scan from cheap signals, in this order: a type-config file,
type-system dependencies in ``package.json``, the ts/js file counts and, only
when those disagree, a capped sample of JS files scored for require-style
versus import-style statements.
"""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path

from import_map.models import AnalysisConfig, Dialect, PLAIN_EXTENSIONS, TYPED_EXTENSIONS
from import_map.scanner.ignore import PathFilter

logger = logging.getLogger(__name__)

_TS_DEPENDENCIES = {"typescript", "ts-node", "tsx", "vue-tsc", "ts-loader"}

_REQUIRE_STYLE_RE = re.compile(r"\brequire\s*\(\s*['\"`]|\bmodule\.exports\b|\bexports\.\w+\s*=")
_IMPORT_STYLE_RE = re.compile(r"^\s*(?:import\s+(?:[\w*{]|['\"`])|export\s+)", re.MULTILINE)


@dataclass
class DialectSignals:
    has_type_config: bool = False
    has_type_dependencies: bool = False
    typed_files: int = 0
    plain_files: int = 0
    require_style: int = 0
    import_style: int = 0
    sampled: bool = False


def _has_type_dependencies(root: Path) -> bool:
    manifest = root / "package.json"
    if not manifest.is_file():
        return False
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning("Could not read %s: %s", manifest, e)
        return False

    names: set[str] = set()
    for section in ("dependencies", "devDependencies", "peerDependencies"):
        deps = data.get(section)
        if isinstance(deps, dict):
            names.update(deps)
    return bool(names & _TS_DEPENDENCIES) or any(n.startswith("@types/") for n in names)


def _walk_source_files(root: Path, config: AnalysisConfig, path_filter: PathFilter):
    skip = set(config.skip_dirs) | set(config.build_dirs)
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(
            d for d in dirnames
            if d not in skip and not d.startswith(".")
            and not path_filter.should_ignore(Path(dirpath) / d, is_dir=True)
        )
        for name in sorted(filenames):
            yield Path(dirpath) / name


def _score_sample(files: list[Path]) -> tuple[int, int]:
    require_style = import_style = 0
    for path in files:
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            continue
        require_style += len(_REQUIRE_STYLE_RE.findall(text))
        import_style += len(_IMPORT_STYLE_RE.findall(text))
    return require_style, import_style


def collect_signals(
    root: Path,
    config: AnalysisConfig | None = None,
    path_filter: PathFilter | None = None,
) -> DialectSignals:
    config = config or AnalysisConfig()
    root = Path(root)
    path_filter = path_filter or PathFilter(root)
    signals = DialectSignals(
        has_type_config=any((root / name).is_file() for name in config.type_config_files),
        has_type_dependencies=_has_type_dependencies(root),
    )

    plain_sample: list[Path] = []
    counted = 0
    for path in _walk_source_files(root, config, path_filter):
        if counted >= config.max_counted_files:
            break
        if path.suffix in TYPED_EXTENSIONS and not path.name.endswith(".d.ts"):
            signals.typed_files += 1
            counted += 1
        elif path.suffix in PLAIN_EXTENSIONS:
            signals.plain_files += 1
            counted += 1
            if len(plain_sample) < config.sample_size:
                plain_sample.append(path)

    ambiguous = (
        not (signals.has_type_config or signals.has_type_dependencies)
        and signals.typed_files and signals.plain_files
    )
    if ambiguous:
        signals.require_style, signals.import_style = _score_sample(plain_sample)
        signals.sampled = True
    return signals


def choose_dialect(signals: DialectSignals) -> Dialect:
    if signals.has_type_config or signals.has_type_dependencies:
        if signals.typed_files >= signals.plain_files:
            return Dialect.TYPESCRIPT
        return Dialect.MIXED

    if not signals.typed_files:
        return Dialect.JAVASCRIPT
    if not signals.plain_files:
        return Dialect.TYPESCRIPT

    # Require-heavy JS next to TS sources is usually compiled CommonJS output.
    if signals.require_style > signals.import_style:
        return Dialect.TYPESCRIPT
    return Dialect.MIXED


def detect_dialect(
    root: Path,
    config: AnalysisConfig | None = None,
    path_filter: PathFilter | None = None,
) -> Dialect:
    signals = collect_signals(root, config, path_filter)
    dialect = choose_dialect(signals)
    logger.debug(
        "Dialect %s (type config=%s, type deps=%s, ts=%d, js=%d, require=%d, import=%d)",
        dialect.value, signals.has_type_config, signals.has_type_dependencies,
        signals.typed_files, signals.plain_files,
        signals.require_style, signals.import_style,
    )
    return dialect
