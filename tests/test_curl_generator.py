from pathlib import Path

from rest_parser.format import parse, parse_file
from rest_parser.generator.curl import CurlGenerator, shell_name

FIXTURES = Path(__file__).parent / "fixtures"

SAMPLE = """@HOST = http://x

### Post
POST {{HOST}}/post HTTP/1.1
Content-Type: application/json
Authorization: Basic dXNlcjpwYXNz

{"a": 1}

>> out.json

### Bearer
GET {{HOST}}/get
Authorization: Bearer {{TOKEN}}
"""


class TestCurlGenerator:
    def setup_method(self):
        self.document = parse(SAMPLE)

    def test_resolved_command(self):
        gen = CurlGenerator(self.document.variables)
        command = gen.render_request(self.document.get("Post"))
        assert command == (
            "curl -X POST http://x/post --http1.1 -H 'Content-Type: application/json' "
            "-u user:pass --data-raw '{\"a\": 1}' -o out.json"
        )

    def test_bearer_header_is_kept(self):
        gen = CurlGenerator(self.document.variables.merged({"TOKEN": "abc"}))
        command = gen.render_request(self.document.get("Bearer"))
        assert command == "curl -X GET http://x/get -H 'Authorization: Bearer abc'"

    def test_unresolved_variables_stay_visible(self):
        gen = CurlGenerator(self.document.variables)
        command = gen.render_request(self.document.get("Bearer"))
        assert "{{TOKEN}}" in command

    def test_shell_variables(self):
        gen = CurlGenerator(self.document.variables, resolve=False)
        command = gen.render_request(self.document.get("Post"))
        assert command.startswith('HOST="http://x"; curl -X POST "${HOST}/post" --http1.1')
        assert '--data-raw "{\\"a\\": 1}"' in command

    def test_generate_names(self):
        document = parse("### A\nGET http://a/\n###\nGET http://b/")
        commands = CurlGenerator().generate(document)
        assert [name for name, _ in commands] == ["A", "Request 2"]
        assert CurlGenerator().generate(document, name="A")[0][1] == "curl -X GET http://a/"

    def test_file_reference_body(self):
        document = parse_file(FIXTURES / "jetbrains.http")
        command = CurlGenerator(document.variables).render_request(document.get("Upload"))
        assert "--data-binary @./payload.json" in command
        assert command.endswith("-o ./out/upload.json")

    def test_templated_file_body_is_inlined(self):
        document = parse_file(FIXTURES / "vscode.rest")
        gen = CurlGenerator(document.variables, base_dir=FIXTURES)
        command = gen.render_request(document.get("Template body"))
        assert """--data-raw '{"user": "admin"}""" in command


class TestShellName:
    def test_shell_name(self):
        assert shell_name("Cool-Word") == "Cool_Word"
        assert shell_name("$uuid") == "uuid"
        assert shell_name("a.b") == "a_b"
