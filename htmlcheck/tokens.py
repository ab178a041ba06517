"""
MUST HAVE REQUIREMENTS:
- Produce token records with kind, tag name, ordered attribute pairs and position.
- Keep duplicate attributes in encounter order; valueless attributes get an empty value.
- Stream markup text through html.parser in chunks rather than loading it whole.
- Walk an lxml element tree as start/end tokens for already-parsed documents.
- Always finish with a single EOF token.
"""
# ----------------------------------
# Token records and sources
# ----------------------------------
import enum
from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import Optional

from lxml import etree

CHUNK = 8192


class TokenKind(enum.Enum):
    START = "start"
    END = "end"
    SELF_CLOSING = "self-closing"
    EOF = "eof"


@dataclass
class Token:
    kind: TokenKind
    name: str = ""
    attrs: list = field(default_factory=list)
    line: Optional[int] = None
    column: Optional[int] = None


EOF = Token(TokenKind.EOF)


# ----------------------------------
# Markup text via html.parser
# ----------------------------------
class P(HTMLParser):
    def __init__(self):
        super().__init__()
        self.out = []

    def _emit(self, kind, tag, attrs=()):
        line, offset = self.getpos()
        pairs = [(k, v if v is not None else "") for k, v in attrs]
        self.out.append(Token(kind, tag, pairs, line, offset + 1))

    def handle_starttag(self, tag, attrs):
        self._emit(TokenKind.START, tag, attrs)

    def handle_startendtag(self, tag, attrs):
        self._emit(TokenKind.SELF_CLOSING, tag, attrs)

    def handle_endtag(self, tag):
        self._emit(TokenKind.END, tag)

    def drain(self):
        out, self.out = self.out, []
        return out


def tokenize(source):
    """Yield tokens from a string or a text file object, ending with EOF."""
    p = P()
    if isinstance(source, str):
        p.feed(source)
        yield from p.drain()
    else:
        while True:
            chunk = source.read(CHUNK)
            if not chunk:
                break
            p.feed(chunk)
            yield from p.drain()
    p.close()
    yield from p.drain()
    yield EOF


# ----------------------------------
# Parsed trees via lxml
# ----------------------------------
def tokens_from_tree(root):
    """Yield START/END tokens for every element under root (an lxml element or tree)."""
    for event, el in etree.iterwalk(root, events=("start", "end")):
        if not isinstance(el.tag, str):
            continue
        name = etree.QName(el).localname
        if event == "start":
            yield Token(TokenKind.START, name, list(el.attrib.items()), el.sourceline)
        else:
            yield Token(TokenKind.END, name)
    yield EOF
