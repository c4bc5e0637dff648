"""Tests for import classification and module resolution."""

from import_map.models import ImportKind
from import_map.resolver import ModuleResolver, detect_source_dir
from import_map.scanner.ignore import PathFilter


def _canon(path):
    return str(path.resolve())


class TestClassify:
    def test_kinds(self, tmp_path):
        resolver = ModuleResolver(tmp_path)
        assert resolver.classify("react") == "external"
        assert resolver.classify("@vue/runtime-core") == "external"
        assert resolver.classify("./utils") == "relative"
        assert resolver.classify("../lib") == "relative"
        assert resolver.classify("@/components/Foo") == "alias"
        assert resolver.classify("~~/server/db") == "alias"
        assert resolver.classify("#components/Header") == "alias"
        assert resolver.classify(str(tmp_path / "a")) == "absolute"

    def test_external_reference_is_not_resolved(self, tmp_path):
        resolver = ModuleResolver(tmp_path)
        ref = resolver.reference("react", ImportKind.IMPORT, tmp_path / "a.ts")
        assert ref.is_external
        assert ref.resolved_path is None
        assert ref.kind is ImportKind.IMPORT


class TestSourceDir:
    def test_framework_setting_wins(self, make_project):
        root = make_project({
            "nuxt.config.ts": "export default defineNuxtConfig({\n  srcDir: 'app/',\n})\n",
            "src/x.ts": "",
            "app/x.ts": "",
        })
        assert detect_source_dir(root) == (root / "app").resolve()

    def test_conventional_src(self, make_project):
        root = make_project({"src/x.ts": ""})
        assert detect_source_dir(root) == (root / "src").resolve()

    def test_falls_back_to_root(self, make_project):
        root = make_project({"x.ts": ""})
        assert detect_source_dir(root) == root.resolve()


class TestResolve:
    def test_alias_to_source_dir(self, make_project):
        root = make_project({"src/components/Foo.ts": "", "src/main.ts": ""})
        resolver = ModuleResolver(root)
        resolved = resolver.resolve("@/components/Foo", root / "src" / "main.ts")
        assert resolved == _canon(root / "src" / "components" / "Foo.ts")

    def test_alias_with_explicit_source_dir(self, make_project):
        root = make_project({"lib/components/Foo.ts": "", "main.ts": ""})
        resolver = ModuleResolver(root, source_dir=root / "lib")
        assert resolver.resolve("~/components/Foo", root / "main.ts") == _canon(root / "lib" / "components" / "Foo.ts")

    def test_root_alias(self, make_project):
        root = make_project({"server/db.ts": "", "src/main.ts": ""})
        resolver = ModuleResolver(root)
        assert resolver.resolve("~~/server/db", root / "src" / "main.ts") == _canon(root / "server" / "db.ts")

    def test_components_alias(self, make_project):
        root = make_project({"src/components/Header.vue": "", "src/app.vue": ""})
        resolver = ModuleResolver(root)
        resolved = resolver.resolve("#components/Header", root / "src" / "app.vue")
        assert resolved == _canon(root / "src" / "components" / "Header.vue")

    def test_probe_order_prefers_ts(self, make_project):
        root = make_project({"utils.ts": "", "utils.js": "", "main.ts": ""})
        resolver = ModuleResolver(root)
        assert resolver.resolve("./utils", root / "main.ts") == _canon(root / "utils.ts")

    def test_literal_path_first(self, make_project):
        root = make_project({"style.css": "", "main.ts": ""})
        resolver = ModuleResolver(root)
        assert resolver.resolve("./style.css", root / "main.ts") == _canon(root / "style.css")

    def test_index_file(self, make_project):
        root = make_project({"pages/Home/index.tsx": "", "main.ts": ""})
        resolver = ModuleResolver(root)
        assert resolver.resolve("./pages/Home", root / "main.ts") == _canon(root / "pages" / "Home" / "index.tsx")

    def test_parent_relative(self, make_project):
        root = make_project({"lib/a.ts": "", "src/deep/b.ts": ""})
        resolver = ModuleResolver(root)
        assert resolver.resolve("../../lib/a", root / "src" / "deep" / "b.ts") == _canon(root / "lib" / "a.ts")

    def test_absolute_source(self, make_project):
        root = make_project({"lib/a.ts": "", "main.ts": ""})
        resolver = ModuleResolver(root)
        assert resolver.resolve(str(root / "lib" / "a"), root / "main.ts") == _canon(root / "lib" / "a.ts")

    def test_unresolved_import_kept_without_path(self, make_project):
        root = make_project({"main.ts": ""})
        resolver = ModuleResolver(root)
        ref = resolver.reference("./missing", ImportKind.REQUIRE, root / "main.ts")
        assert not ref.is_external
        assert ref.resolved_path is None

    def test_ignored_target_is_skipped(self, make_project):
        root = make_project({
            ".gitignore": "generated.ts\n",
            "generated.ts": "",
            "generated.js": "",
            "main.ts": "",
        })
        resolver = ModuleResolver(root, PathFilter.from_root(root))
        assert resolver.resolve("./generated", root / "main.ts") == _canon(root / "generated.js")

    def test_ignored_only_candidate_is_unresolved(self, make_project):
        root = make_project({".gitignore": "*.gen.ts\n", "api.gen.ts": "", "main.ts": ""})
        resolver = ModuleResolver(root, PathFilter.from_root(root))
        assert resolver.resolve("./api.gen", root / "main.ts") is None

    def test_filesystem_root_is_unresolved(self, make_project):
        root = make_project({"main.ts": ""})
        resolver = ModuleResolver(root)
        assert resolver.resolve("/", root / "main.ts") is None
        assert resolver.resolve("../" * 64, root / "main.ts") is None
