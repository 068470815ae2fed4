"""HTML document assembly for rendered pages."""

import json
import re
from collections.abc import Mapping
from typing import Any

from render_cache.entities import RenderResult

MOUNT_POINT = '<div id="app"></div>'

# Injection point tag -> site setting holding its replacement
INJECTION_POINTS = {
    "analytics": "blog.analyticsCode",
    "custom-js": "blog.customJs",
    "custom-css": "blog.customCss",
}

DEV_CLIENT_SCRIPT = re.compile(r'<script[^>]*src="/@vite/client"[^>]*></script>')
HTML_OPEN = re.compile(r"<html(\s[^>]*)?>", re.IGNORECASE)
BODY_OPEN = re.compile(r"<body(\s[^>]*)?>", re.IGNORECASE)


def serialize_for_script(value: Any) -> str:
    """Serialize ``value`` to JSON that is safe inside an inline script."""
    return json.dumps(value, ensure_ascii=False, default=str).replace("<", "\\u003c")


def _add_attrs(pattern: re.Pattern[str], tag: str, html: str, attrs: str) -> str:
    if not attrs:
        return html

    def merge(match: re.Match[str]) -> str:
        return f"<{tag}{match.group(1) or ''} {attrs.strip()}>"

    return pattern.sub(merge, html, count=1)


def _insert_before(html: str, marker: str, content: str) -> str:
    if not content:
        return html
    index = html.find(marker)
    if index == -1:
        return html
    return html[:index] + content + html[index:]


def apply_head(html: str, head: Mapping[str, str]) -> str:
    """Merge a head payload into the document.

    Recognized keys: ``headTags``, ``htmlAttrs``, ``bodyAttrs``,
    ``bodyTagsOpen`` and ``bodyTags``.
    """
    html = _insert_before(html, "</head>", head.get("headTags", ""))
    html = _add_attrs(HTML_OPEN, "html", html, head.get("htmlAttrs", ""))
    html = _add_attrs(BODY_OPEN, "body", html, head.get("bodyAttrs", ""))

    body_open = head.get("bodyTagsOpen", "")
    if body_open:
        match = BODY_OPEN.search(html)
        if match:
            html = html[: match.end()] + body_open + html[match.end():]

    return _insert_before(html, "</body>", head.get("bodyTags", ""))


def inject_settings(html: str, settings: Mapping[str, str]) -> str:
    """Replace site-configured injection points, empty when unset."""
    for tag, key in INJECTION_POINTS.items():
        value = settings.get(key) or ""
        html = html.replace(f"<{tag} />", value, 1).replace(f"<{tag}>", value, 1)
    return html


def fill_placeholders(html: str, metadata: Mapping[str, str]) -> str:
    """Substitute ``{name}`` placeholders with metadata values."""
    for key, value in metadata.items():
        html = html.replace(f"{{{key}}}", str(value), 1)
    return html


class DocumentAssembler:
    """Turns a template and a render result into the final HTML document.

    Args:
        production: Strip development-only client scripts when True.
        state_global: Window property receiving the application state.
        data_global: Window property receiving entity and prefetch data.
    """

    def __init__(
        self,
        production: bool = False,
        state_global: str = "__APP_STATE__",
        data_global: str = "__APP_DATA__",
    ) -> None:
        self._production = production
        self._state_global = state_global
        self._data_global = data_global

    def data_scripts(self, result: RenderResult) -> str:
        """Inline scripts carrying client hydration data."""
        data = serialize_for_script({"entities": result.entities, "prefetch": result.prefetch})
        state = serialize_for_script(result.state)
        return (
            f"<script>window.{self._data_global} = {data};</script>"
            f"\n<script>window.{self._state_global} = {state}</script>"
        )

    def assemble(self, template: str, result: RenderResult) -> str:
        """Build the document served for ``result``."""
        html = template.replace(MOUNT_POINT, f'<div id="app">{result.markup}</div>', 1)
        html = apply_head(html, result.head)
        html = inject_settings(html, result.settings)

        if self._production:
            html = DEV_CLIENT_SCRIPT.sub("", html)

        html = fill_placeholders(html, result.metadata)
        return html.replace("</title>", f"</title>{self.data_scripts(result)}", 1)
