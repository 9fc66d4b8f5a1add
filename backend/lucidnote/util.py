import html
import re

_TAG_RE = re.compile(r"<[^>]*>")
_BLOCK_END_RE = re.compile(r"</(p|div|li|h[1-6]|blockquote|pre)>|<br\s*/?>", re.IGNORECASE)
_BLANK_LINES_RE = re.compile(r"\n{3,}")


def strip_tags(content: str) -> str:
    """Plain text of rich-text HTML, keeping block boundaries as newlines."""
    text = _BLOCK_END_RE.sub("\n", content or "")
    text = html.unescape(_TAG_RE.sub("", text)).replace("\xa0", " ")
    return _BLANK_LINES_RE.sub("\n\n", text).strip()


def is_blank_rich_text(content: str | None) -> bool:
    """True when rich-text content has no visible text, e.g. ``<p></p>``."""
    return not strip_tags(content or "")
