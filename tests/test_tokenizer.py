import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from links_toggler.core.models import Direction, LinkToken, TokenKind
from links_toggler.core.tokenizer import scan


def _join(stream):
    return "".join(seg if isinstance(seg, str) else seg.raw for seg in stream)


def test_reassembles_text():
    text = "a [[Note]] b [[Other|x]] c ![[pic.png]] [md](x.md) d"
    assert _join(scan(text, Direction.WIKI_TO_MD)) == text
    assert _join(scan(text, Direction.MD_TO_WIKI)) == text


def test_wiki_parts():
    tokens = list(scan("[[ Note #Head | Alias ]]", Direction.WIKI_TO_MD).tokens())
    assert len(tokens) == 1
    tok = tokens[0]
    assert tok.kind is TokenKind.WIKI
    assert tok.target == "Note"
    assert tok.fragment == "Head"
    assert tok.alias == "Alias"
    assert tok.raw == "[[ Note #Head | Alias ]]"


def test_wiki_without_alias():
    tok = next(scan("[[Note#^block]]", Direction.WIKI_TO_MD).tokens())
    assert tok.alias is None
    assert tok.fragment == "^block"
    assert tok.label == "Note"


def test_wiki_splits_on_first_pipe_and_hash():
    tok = next(scan("[[Note#a#b|x|y]]", Direction.WIKI_TO_MD).tokens())
    assert tok.target == "Note"
    assert tok.fragment == "a#b"
    assert tok.alias == "x|y"


def test_wiki_escaped_pipe_does_not_split():
    tok = next(scan(r"[[Note\|x]]", Direction.WIKI_TO_MD).tokens())
    assert tok.target == r"Note\|x"
    assert tok.alias is None


def test_wiki_missing_base_is_literal():
    segments = list(scan("[[#Heading]] and [[ ]] and [[|x]]", Direction.WIKI_TO_MD))
    assert all(isinstance(s, str) for s in segments)


def test_wiki_embed_is_image():
    tok = next(scan("![[diagram.png]]", Direction.WIKI_TO_MD).tokens())
    assert tok.kind is TokenKind.IMAGE


def test_wiki_brackets_inside_not_matched():
    assert list(scan("[[a[b]]", Direction.WIKI_TO_MD).tokens()) == []


def test_markdown_link_with_title():
    tok = next(scan('[Text](Folder/Note.md "Title")', Direction.MD_TO_WIKI).tokens())
    assert tok.kind is TokenKind.MARKDOWN
    assert tok.alias == "Text"
    assert tok.target == "Folder/Note.md"
    assert tok.fragment is None


def test_markdown_decodes_path_and_fragment():
    tok = next(scan("[x](My%20Note.md#Some%20Heading)", Direction.MD_TO_WIKI).tokens())
    assert tok.target == "My Note.md"
    assert tok.fragment == "Some Heading"


def test_markdown_image_kind():
    tok = next(scan("![alt](img.png)", Direction.MD_TO_WIKI).tokens())
    assert tok.kind is TokenKind.IMAGE


def test_markdown_uri_and_empty_path_are_literal():
    text = "[site](https://example.com/a#b) [top](#heading)"
    segments = list(scan(text, Direction.MD_TO_WIKI))
    assert all(isinstance(s, str) for s in segments)
    assert _join(segments) == text


def test_markdown_escaped_paren_in_path():
    tok = next(scan(r"[x](a\)b.md)", Direction.MD_TO_WIKI).tokens())
    assert tok.target == "a)b.md"


def test_stream_is_restartable():
    stream = scan("[[A]] [[B]]", Direction.WIKI_TO_MD)
    first = list(stream)
    second = list(stream)
    assert first == second
    assert [t.target for t in stream.tokens()] == ["A", "B"]
    assert isinstance(first[0], LinkToken)
