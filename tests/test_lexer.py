"""Tests for splitting .csg text into leveled records."""

import pytest

from csg2xcsg.errors import LexError
from csg2xcsg.lexer import SourceRecord, lex_csg


class TestLexCsg:
    def test_levels_and_lines(self, simple_csg):
        records = lex_csg(simple_csg)
        assert [(r.level, r.line) for r in records] == [
            (0, 1),
            (1, 2),
            (2, 3),
            (1, 5),
            (2, 6),
            (2, 7),
        ]
        assert records[0] == SourceRecord("group()", 0, 1)

    def test_whitespace_removed_from_signature(self):
        records = lex_csg("cube(size = [2, 3, 4], center = true);")
        assert records[0].signature == "cube(size=[2,3,4],center=true)"

    def test_whitespace_kept_inside_strings(self):
        records = lex_csg('text(text = "a b", size = 10);')
        assert records[0].signature == 'text(text="a b",size=10)'

    def test_empty_block_on_one_line(self):
        records = lex_csg("group() { }\ncube(size = 1);")
        assert [(r.signature, r.level) for r in records] == [
            ("group()", 0),
            ("cube(size=1)", 0),
        ]

    def test_comments_skipped(self):
        text = "// header\n/* block\ncomment */ sphere(r = 1); // trailing\n"
        records = lex_csg(text)
        assert records == [SourceRecord("sphere(r=1)", 0, 3)]

    def test_multiline_statement_reports_first_line(self):
        records = lex_csg("\n\npolygon(points = [[0, 0],\n  [1, 0], [1, 1]]);")
        assert records[0].line == 3
        assert records[0].signature == "polygon(points=[[0,0],[1,0],[1,1]])"

    def test_highlight_modifier_ignored(self):
        records = lex_csg("#cube(size = 1);")
        assert records == [SourceRecord("cube(size=1)", 0, 1)]

    def test_disable_modifier_drops_subtree(self):
        text = "%union() {\n  cube(size = 1);\n}\nsphere(r = 2);\n*circle(r = 1);\n"
        records = lex_csg(text)
        assert records == [SourceRecord("sphere(r=2)", 0, 4)]

    def test_empty_input(self):
        assert lex_csg("") == []


class TestLexErrors:
    def test_unclosed_block(self):
        with pytest.raises(LexError, match="unclosed"):
            lex_csg("group() {\n cube(size = 1);\n")

    def test_stray_closing_brace(self):
        with pytest.raises(LexError, match="line 2: unmatched"):
            lex_csg("cube(size = 1);\n}")

    def test_missing_terminator(self):
        with pytest.raises(LexError, match="expected ';'"):
            lex_csg("cube(size = 1)")

    def test_unbalanced_parentheses(self):
        with pytest.raises(LexError, match="unbalanced"):
            lex_csg("cube(size = [1, 2, 3];")

    def test_missing_parenthesis(self):
        with pytest.raises(LexError, match="expected '\\('"):
            lex_csg("cube;")

    def test_unterminated_comment(self):
        with pytest.raises(LexError, match="unterminated block comment"):
            lex_csg("/* never closed")
