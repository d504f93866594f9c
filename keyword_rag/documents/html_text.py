"""HTML to plain text conversion for fetched pages."""

import html
import re

_SCRIPT = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_STYLE = re.compile(r"<style\b[^<]*(?:(?!</style>)<[^<]*)*</style>", re.IGNORECASE)
_HEAD = re.compile(r"<head\b[^<]*(?:(?!</head>)<[^<]*)*</head>", re.IGNORECASE)
_COMMENT = re.compile(r"<!--.*?-->", re.DOTALL)
_BLOCK_TAG = re.compile(
    r"</?(?:div|p|br|h[1-6]|li|tr|section|article|header|footer|nav|aside)\b[^>]*>",
    re.IGNORECASE,
)
_ANY_TAG = re.compile(r"<[^>]+>")
_EXTRA_BLANK_LINES = re.compile(r"\n\s*\n\s*\n")
_INLINE_SPACE = re.compile(r"[ \t]+")


def html_to_text(markup: str) -> str:
    """Extract readable text from an HTML page.

    Scripts, styles, the head block and comments are dropped, block-level
    tags become line breaks, entities are decoded and whitespace is tidied
    so paragraphs survive as blank-line separated blocks.
    """
    text = _SCRIPT.sub("", markup)
    text = _STYLE.sub("", text)
    text = _COMMENT.sub("", text)
    text = _HEAD.sub("", text)

    text = _BLOCK_TAG.sub("\n", text)
    text = _ANY_TAG.sub(" ", text)
    text = html.unescape(text).replace("\xa0", " ")

    text = _EXTRA_BLANK_LINES.sub("\n\n", text)
    text = _INLINE_SPACE.sub(" ", text)
    text = "\n".join(line.strip() for line in text.split("\n"))
    text = _EXTRA_BLANK_LINES.sub("\n\n", text)
    return text.strip()
