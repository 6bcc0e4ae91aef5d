from rest_parser.format import build_url, extract_query_parameters, url_base
from rest_parser.parser.base import QueryParameter
from rest_parser.template import parse_template
from rest_parser.variables import VariableEnvironment


class TestExtractQueryParameters:
    def test_templated_values_in_order(self):
        params = extract_query_parameters(parse_template("http://x/get?a=1&b={{VAR}}"))
        assert [p.name for p in params] == ["a", "b"]
        assert params[0].value.raw == "1"
        assert params[1].value.variable_names == ("VAR",)

    def test_no_query(self):
        assert extract_query_parameters("https://example.com") == ()
        assert extract_query_parameters("{{my_url}}") == ()

    def test_variable_base(self):
        params = extract_query_parameters("{{VAR}}?x={{b}}&word=cool")
        assert [(p.name, p.value.raw) for p in params] == [("x", "{{b}}"), ("word", "cool")]

    def test_missing_equals_and_empty_pairs(self):
        params = extract_query_parameters("http://x/?flag&&a=&b=2#frag")
        assert [(p.name, p.value.raw) for p in params] == [("flag", ""), ("a", ""), ("b", "2")]

    def test_repeated_names_kept(self):
        params = extract_query_parameters("http://x/?id=1&id=2")
        assert [p.value.raw for p in params] == ["1", "2"]

    def test_rendered_first_when_variables_given(self):
        variables = VariableEnvironment.from_values({"q": "term", "rest": "page=2&size=10"})
        params = extract_query_parameters("http://x/?q={{q}}&{{rest}}", variables)
        assert [(p.name, p.value.raw) for p in params] == [("q", "term"), ("page", "2"), ("size", "10")]


class TestBuildUrl:
    def test_url_base(self):
        assert url_base("{{host}}/a?b=1").raw == "{{host}}/a"

    def test_rebuild(self):
        url = parse_template("{{host}}/search?q=old")
        params = [QueryParameter(name="q", value=parse_template("{{term}}")), QueryParameter(name="page", value=parse_template("2"))]
        rebuilt = build_url(url, params)
        assert rebuilt.raw == "{{host}}/search?q={{term}}&page=2"
        assert rebuilt.variable_names == ("host", "term")

    def test_rebuild_without_parameters(self):
        assert build_url("http://x/?a=1", []).raw == "http://x/"

    def test_extract_then_build(self):
        url = parse_template("http://x/get?a=1&b={{VAR}}")
        assert build_url(url, extract_query_parameters(url)) == url
