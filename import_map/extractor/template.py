"""Script-block isolation for single-file component templates (.vue, .svelte)."""

from __future__ import annotations

from html.parser import HTMLParser

# Script types that never contain module code (absent type= means JS)
_NON_JS_TYPES = {"application/json", "application/ld+json", "importmap", "text/template"}


class _ScriptBlockFinder(HTMLParser):
    """HTMLParser subclass that collects the content of <script> blocks."""

    def __init__(self):
        super().__init__(convert_charrefs=False)
        self.blocks: list[str] = []
        self._in_script = False
        self._skip = False
        self._parts: list[str] = []

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]):
        if tag != "script":
            return
        script_type = (dict(attrs).get("type") or "").strip().lower()
        self._in_script = True
        self._skip = script_type in _NON_JS_TYPES
        self._parts = []

    def handle_data(self, data: str):
        if self._in_script:
            self._parts.append(data)

    def handle_endtag(self, tag: str):
        if tag == "script" and self._in_script:
            if not self._skip:
                self.blocks.append("".join(self._parts))
            self._in_script = False
            self._skip = False
            self._parts = []


def isolate_scripts(text: str) -> str:
    """Concatenate the bodies of every script block in a component file."""
    finder = _ScriptBlockFinder()
    finder.feed(text)
    finder.close()
    return "\n".join(finder.blocks)
