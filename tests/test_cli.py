import json
import logging
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from rest_parser.cli import main

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestCliShow:
    def test_show_json(self):
        runner = CliRunner()
        result = runner.invoke(main, ["show", str(FIXTURES / "jetbrains.http")])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["flavor"] == "jetbrains"
        assert data["variables"]["HOST"] == "http://httpbin.org"
        assert [r["name"] for r in data["requests"]] == ["SimpleGet", "CreateUser", "Upload"]
        create = data["requests"][1]
        assert create["auth"] == {"kind": "bearer", "token": "{{TOKEN}}"}
        assert create["commands"] == {"no-log": None, "timeout": "300"}
        assert data["requests"][2]["body"] == {"file": "./payload.json", "process_variables": False}

    def test_show_yaml(self):
        runner = CliRunner()
        result = runner.invoke(main, ["show", str(FIXTURES / "jetbrains.http"), "--format", "yaml"])

        assert result.exit_code == 0
        data = yaml.safe_load(result.output)
        assert data["requests"][0]["url"] == "{{HOST}}/get"

    def test_show_reports_failures(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--log-level", "ERROR", "show", str(FIXTURES / "vscode.rest")])

        assert result.exit_code == 0
        assert "Block 2 (line 20)" in result.output

    def test_show_strict(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--log-level", "ERROR", "show", "--strict", str(FIXTURES / "vscode.rest")])
        assert result.exit_code == 1

    def test_show_flavor_override(self):
        runner = CliRunner()
        result = runner.invoke(main, ["show", "--flavor", "vscode", str(FIXTURES / "jetbrains.http")])
        assert json.loads(result.output)["flavor"] == "vscode"

    def test_missing_file(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ["show", str(tmp_path / "missing.http")])
        assert result.exit_code == 2


class TestCliVars:
    def test_vars_rendered(self):
        runner = CliRunner()
        result = runner.invoke(main, ["vars", str(FIXTURES / "jetbrains.http")])

        assert result.exit_code == 0
        assert "HOST = http://httpbin.org" in result.output
        assert "TOKEN = secret-token" in result.output

    def test_vars_override(self):
        runner = CliRunner()
        result = runner.invoke(main, [
            "--log-level", "ERROR",
            "vars", str(FIXTURES / "vscode.rest"),
            "--var", "user=root",
        ])

        assert result.exit_code == 0
        assert "password = root-pass" in result.output

    def test_vars_cycle_reported(self, tmp_path):
        doc = tmp_path / "cycle.http"
        doc.write_text("@a = {{b}}\n@b = {{a}}\n", encoding="utf-8")
        runner = CliRunner()
        result = runner.invoke(main, ["vars", str(doc)])

        assert result.exit_code == 0
        assert "a = <error:" in result.output


class TestCliCurl:
    def test_curl_single_request(self):
        runner = CliRunner()
        result = runner.invoke(main, ["curl", str(FIXTURES / "jetbrains.http"), "--name", "SimpleGet"])

        assert result.exit_code == 0
        assert "# SimpleGet" in result.output
        assert "curl -X GET http://httpbin.org/get --http1.1" in result.output

    def test_curl_with_var(self):
        runner = CliRunner()
        result = runner.invoke(main, [
            "curl", str(FIXTURES / "jetbrains.http"),
            "--name", "SimpleGet",
            "--var", "HOST=http://localhost:8080",
        ])

        assert result.exit_code == 0
        assert "http://localhost:8080/get" in result.output

    def test_curl_no_resolve(self):
        runner = CliRunner()
        result = runner.invoke(main, ["curl", str(FIXTURES / "jetbrains.http"), "--name", "SimpleGet", "--no-resolve"])

        assert result.exit_code == 0
        assert 'curl -X GET "${HOST}/get"' in result.output

    def test_curl_all_requests(self):
        runner = CliRunner()
        result = runner.invoke(main, ["curl", str(FIXTURES / "jetbrains.http")])

        assert result.exit_code == 0
        assert result.output.count("curl -X") == 3

    def test_curl_unknown_name(self):
        runner = CliRunner()
        result = runner.invoke(main, ["curl", str(FIXTURES / "jetbrains.http"), "--name", "Nope"])
        assert result.exit_code == 1
        assert "no request named" in result.output

    def test_curl_bad_var(self):
        runner = CliRunner()
        result = runner.invoke(main, ["curl", str(FIXTURES / "jetbrains.http"), "--var", "novalue"])
        assert result.exit_code == 2
