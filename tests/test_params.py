"""Tests for signature parameter parsing."""

from csg2xcsg.params import parse_parameters, positional_name, signature_tag


class TestSignatureTag:
    def test_tag_before_parenthesis(self):
        assert signature_tag("cube(size=1)") == "cube"

    def test_tag_without_parameters(self):
        assert signature_tag("group()") == "group"


class TestPositionalName:
    def test_zero_padded(self):
        assert positional_name(0) == "_p000"
        assert positional_name(12) == "_p012"


class TestParseParameters:
    def test_named_parameters(self):
        params = parse_parameters("cube(size=[2,3,4],center=true)")
        assert set(params) == {"size", "center"}
        assert params["size"].size() == 3
        assert params["center"].to_bool() is True

    def test_spaces_around_names_and_values(self):
        params = parse_parameters("cube(size = [2, 3, 4], center = false)")
        assert params["size"].get(2).to_double() == 4.0
        assert params["center"].to_bool() is False

    def test_dollar_parameters(self):
        params = parse_parameters("sphere($fn=0,$fa=12,$fs=2,r=5)")
        assert params["$fa"].to_double() == 12.0
        assert params["r"].to_double() == 5.0

    def test_no_parameters(self):
        assert parse_parameters("group()") == {}

    def test_positional_matrix(self):
        params = parse_parameters(
            "multmatrix([[1,0,0,10],[0,1,0,0],[0,0,1,0],[0,0,0,1]])"
        )
        assert list(params) == ["_p000"]
        matrix = params["_p000"]
        assert matrix.size() == 4
        assert matrix.get(0).get(3).to_double() == 10.0

    def test_positional_names_follow_position(self):
        params = parse_parameters("f(1,b=2,3)")
        assert set(params) == {"_p000", "b", "_p002"}
        assert params["_p002"].to_double() == 3.0

    def test_undef_dropped(self):
        params = parse_parameters("polygon(points=[[0,0],[1,0],[1,1]],paths=undef,convexity=1)")
        assert "paths" not in params
        assert params["points"].size() == 3

    def test_unparseable_value_dropped(self):
        params = parse_parameters("cube(size=oops,center=true)")
        assert "size" not in params
        assert "center" in params

    def test_string_with_separators(self):
        params = parse_parameters('text(text="a,b=c",size=10)')
        assert params["text"].to_string() == "a,b=c"
        assert params["size"].to_double() == 10.0

    def test_equals_inside_vector_not_a_separator(self):
        params = parse_parameters("color([1,0,0,1])")
        assert params["_p000"].size() == 4
