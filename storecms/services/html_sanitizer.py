# storecms/services/html_sanitizer.py
# Legacy HTML sanitizer (bleach). Removes script/style elements with their
# content, event-handler and srcdoc attributes, javascript: and non-image
# data: URIs; keeps the rest.
from __future__ import annotations

from typing import Optional

from bleach.css_sanitizer import CSSSanitizer
from bleach.html5lib_shim import Filter
from bleach.sanitizer import Cleaner

# Broad allowlist: editors paste arbitrary markup and we only strip the
# executable parts.
ALLOWED_TAGS = frozenset({
    "a", "abbr", "address", "article", "aside", "b", "blockquote", "br",
    "caption", "cite", "code", "col", "colgroup", "dd", "del", "details",
    "div", "dl", "dt", "em", "figcaption", "figure", "footer", "h1", "h2",
    "h3", "h4", "h5", "h6", "header", "hr", "i", "img", "ins", "kbd", "li",
    "main", "mark", "nav", "ol", "p", "picture", "pre", "q", "s", "section",
    "small", "source", "span", "strong", "sub", "summary", "sup", "table",
    "tbody", "td", "tfoot", "th", "thead", "time", "tr", "u", "ul", "video",
    "audio", "iframe",
    # let through the sanitizer so DropExecutableFilter can remove them whole
    "script", "style",
})

DROPPED_ELEMENTS = frozenset({"script", "style"})
URI_ATTRIBUTES = frozenset({"href", "src", "xlink:href", "action", "formaction", "poster"})
# attributes that carry markup or script on their own
DENIED_ATTRIBUTES = frozenset({"srcdoc"})

ALLOWED_PROTOCOLS = frozenset({"http", "https", "mailto", "tel", "data", "javascript"})
# inline images stay; any other data: URI is rewritten like javascript:
SAFE_DATA_PREFIXES = ("data:image/png", "data:image/jpeg", "data:image/gif", "data:image/webp", "data:image/avif")


def _allow_attribute(tag: str, name: str, value: str) -> bool:
    name = name.lower()
    return not name.startswith("on") and name not in DENIED_ATTRIBUTES


def _attr_name(key) -> str:
    # html5lib token attributes are keyed by (namespace, name)
    return key[1] if isinstance(key, tuple) else key


def _compact(value: str) -> str:
    return "".join(ch for ch in (value or "") if not ch.isspace() and ord(ch) > 0x1F).lower()


def _is_executable_uri(value: str) -> bool:
    compact = _compact(value)
    if compact.startswith("javascript:"):
        return True
    return compact.startswith("data:") and not compact.startswith(SAFE_DATA_PREFIXES)


class DropExecutableFilter(Filter):
    """Runs after bleach's own filter: drops script/style subtrees, neutralizes executable URIs."""

    def __iter__(self):
        depth = 0
        for token in super().__iter__():
            ttype = token.get("type")
            name = (token.get("name") or "").lower()

            if name in DROPPED_ELEMENTS and ttype == "StartTag":
                depth += 1
                continue
            if name in DROPPED_ELEMENTS and ttype == "EndTag":
                depth = max(depth - 1, 0)
                continue
            if name in DROPPED_ELEMENTS and ttype == "EmptyTag":
                continue
            if depth:
                continue

            if ttype in ("StartTag", "EmptyTag") and token.get("data"):
                attrs = dict(token["data"])
                for key, value in attrs.items():
                    if _attr_name(key).lower() in URI_ATTRIBUTES and _is_executable_uri(value):
                        attrs[key] = "#"
                token["data"] = attrs

            yield token


def _build_cleaner() -> Cleaner:
    return Cleaner(
        tags=ALLOWED_TAGS,
        attributes=_allow_attribute,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
        strip_comments=True,
        filters=[DropExecutableFilter],
        css_sanitizer=CSSSanitizer(),
    )


def sanitize_html(html: Optional[str]) -> Optional[str]:
    """
    >>> sanitize_html('<p>hi</p><script>alert(1)</script>')
    '<p>hi</p>'
    >>> sanitize_html('<a onclick="x()">go</a>')
    '<a>go</a>'
    >>> sanitize_html('<a href="javascript:alert(1)">go</a>')
    '<a href="#">go</a>'
    """
    if not html:
        return html
    # Cleaner instances are not thread-safe; one per call, like bleach.clean()
    return _build_cleaner().clean(html)
