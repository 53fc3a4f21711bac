"""Content type detection from the leading bytes of a file.

Binary formats are recognised by ``filetype``'s magic-number matchers. Markup
has no magic number, so HTML, XML and SVG matchers are registered with
``filetype`` here and look at the first tag after any byte order mark and
leading whitespace. Anything else is ``text/plain`` unless it holds binary
control bytes.
"""

import filetype

SNIFF_LENGTH = 512

TEXT_PLAIN = "text/plain"
OCTET_STREAM = "application/octet-stream"

UTF8_BOM = b"\xef\xbb\xbf"
TEXT_BOMS = (UTF8_BOM, b"\xfe\xff", b"\xff\xfe")

_TEXT_CONTROL_BYTES = frozenset(b"\t\n\x0c\r\x1b")
_MARKUP_WHITESPACE = b"\t\n\x0c\r "

# Lowercased tag openings; each must be followed by a space or ">".
HTML_TAGS = (
    b"<!doctype html",
    b"<html",
    b"<head",
    b"<script",
    b"<iframe",
    b"<h1",
    b"<div",
    b"<font",
    b"<table",
    b"<a",
    b"<style",
    b"<title",
    b"<b",
    b"<body",
    b"<br",
    b"<p",
    b"<!--",
)


def markup_head(buf: bytes | bytearray) -> bytes:
    """Lowercased sniff window without a UTF-8 BOM and leading whitespace."""
    head = bytes(buf[:SNIFF_LENGTH])
    head = head.removeprefix(UTF8_BOM)
    return head.lstrip(_MARKUP_WHITESPACE).lower()


def _opens_with_tag(head: bytes, tag: bytes) -> bool:
    return head.startswith(tag) and head[len(tag) : len(tag) + 1] in (b" ", b">")


def _is_svg(head: bytes) -> bool:
    return _opens_with_tag(head, b"<svg") or (head.startswith(b"<?xml") and b"<svg" in head)


class Html(filetype.Type):
    MIME = "text/html"
    EXTENSION = "html"

    def __init__(self) -> None:
        super().__init__(mime=self.MIME, extension=self.EXTENSION)

    def match(self, buf) -> bool:
        head = markup_head(buf)
        return any(_opens_with_tag(head, tag) for tag in HTML_TAGS)


class Svg(filetype.Type):
    MIME = "image/svg+xml"
    EXTENSION = "svg"

    def __init__(self) -> None:
        super().__init__(mime=self.MIME, extension=self.EXTENSION)

    def match(self, buf) -> bool:
        return _is_svg(markup_head(buf))


class Xml(filetype.Type):
    MIME = "text/xml"
    EXTENSION = "xml"

    def __init__(self) -> None:
        super().__init__(mime=self.MIME, extension=self.EXTENSION)

    def match(self, buf) -> bool:
        head = markup_head(buf)
        return head.startswith(b"<?xml") and not _is_svg(head)


for _matcher in (Xml(), Svg(), Html()):
    filetype.add_type(_matcher)


def _looks_binary(head: bytes) -> bool:
    return any(byte < 0x20 and byte not in _TEXT_CONTROL_BYTES for byte in head) or b"\x7f" in head


def detect_content_type(head: bytes) -> str:
    """Best-effort MIME type for ``head``, read as at most ``SNIFF_LENGTH`` bytes. Never fails."""
    head = bytes(head[:SNIFF_LENGTH])

    kind = filetype.guess(head)
    if kind is not None:
        return kind.mime

    # UTF-16 text is full of NUL bytes, so a byte order mark settles it first.
    if head.startswith(TEXT_BOMS):
        return TEXT_PLAIN
    if _looks_binary(head):
        return OCTET_STREAM
    return TEXT_PLAIN
