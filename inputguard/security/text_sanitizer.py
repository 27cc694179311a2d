"""Free-text and chat message sanitization.

User-generated text is cleaned, never rejected: markup capable of script
execution or unsafe embedding is stripped, while a safe subset of
formatting tags (the UGC policy) is preserved.  Cleaning is done with
``bleach``.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping

from bleach.sanitizer import Cleaner

from inputguard.security.audit import SecuritySeverity, fingerprint, log_security_event
from inputguard.security.input_validators import blank_to_none, normalize_unicode

# ── UGC policy ──────────────────────────────────────────────────────────

UGC_TAGS: frozenset[str] = frozenset({
    "a", "abbr", "acronym", "address", "article", "aside", "b", "bdi", "bdo",
    "big", "blockquote", "br", "caption", "center", "cite", "code", "col",
    "colgroup", "dd", "del", "details", "dfn", "div", "dl", "dt", "em",
    "figcaption", "figure", "h1", "h2", "h3", "h4", "h5", "h6", "hgroup", "hr",
    "i", "img", "ins", "kbd", "li", "mark", "ol", "p", "pre", "q", "rp", "rt",
    "ruby", "s", "samp", "small", "span", "strike", "strong", "sub", "summary",
    "sup", "table", "tbody", "td", "tfoot", "th", "thead", "time", "tr", "tt",
    "u", "ul", "var", "wbr",
})

UGC_ATTRIBUTES: Mapping[str, tuple[str, ...]] = {
    "*": ("dir", "lang", "title"),
    "a": ("href",),
    "abbr": ("title",),
    "img": ("src", "alt", "width", "height"),
    "ol": ("start", "type"),
    "q": ("cite",),
    "blockquote": ("cite",),
    "td": ("colspan", "rowspan", "headers"),
    "th": ("colspan", "rowspan", "headers", "scope", "abbr"),
    "time": ("datetime",),
}

UGC_PROTOCOLS: frozenset[str] = frozenset({"http", "https", "mailto"})


class UGCSanitizer:
    """Cleans HTML in user-generated content with a fixed allow-list.

    ``Cleaner`` keeps parser state between calls, so each thread
    gets its own cleaner built from the same immutable policy.

    Args:
        tags: Allowed element names.
        attributes: Allowed attributes per element (``"*"`` for all elements).
        protocols: Allowed URL schemes in ``href``/``src``.
    """

    def __init__(
        self,
        tags: frozenset[str] = UGC_TAGS,
        attributes: Mapping[str, tuple[str, ...]] = UGC_ATTRIBUTES,
        protocols: frozenset[str] = UGC_PROTOCOLS,
    ) -> None:
        self.tags = tags
        self.attributes = {tag: list(attrs) for tag, attrs in attributes.items()}
        self.protocols = protocols
        self._local = threading.local()

    def _cleaner(self) -> Cleaner:
        cleaner = getattr(self._local, "cleaner", None)
        if cleaner is None:
            cleaner = Cleaner(
                tags=self.tags,
                attributes=self.attributes,
                protocols=self.protocols,
                strip=True,
                strip_comments=True,
            )
            self._local.cleaner = cleaner
        return cleaner

    def sanitize(self, text: str) -> str:
        """Return *text* with unsafe markup removed, trimmed."""
        cleaned = self._cleaner().clean(text).strip()
        if "<" in text and cleaned != text:
            log_security_event(
                "markup_neutralized",
                SecuritySeverity.MEDIUM,
                f"fingerprint={fingerprint(text)}",
            )
        return cleaned


_ugc_sanitizer = UGCSanitizer()

# Removing a tag can join text that normalizes or parses differently, so
# cleaning repeats until the output is stable.
_MAX_PASSES = 3


def _clean_until_stable(value: str, normalize: bool) -> str:
    for _ in range(_MAX_PASSES):
        candidate = normalize_unicode(value) if normalize else value
        cleaned = _ugc_sanitizer.sanitize(candidate)
        if cleaned == value:
            break
        value = cleaned
    return value


def sanitize_text(raw: str | None) -> str | None:
    """Clean optional free text.

    Absent or blank input yields ``None``; so does text that is empty once
    the markup is gone.  Never raises.
    """
    value = blank_to_none(raw)
    if value is None:
        return None
    return _clean_until_stable(value, normalize=False) or None


def sanitize_message_content(raw: str) -> str:
    """Trim, NFKC-normalize and clean a chat message.  Never raises."""
    return _clean_until_stable(raw.strip(), normalize=True)
