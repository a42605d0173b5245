"""
Tests for the command-line send command.
"""

import json

from cli import run_send


class TestSendCommand:

    def test_send_with_config(self, tmp_path, capsys):
        path = tmp_path / "pipeline.json"
        path.write_text(json.dumps({"strategies": [{"type": "popup"}]}))

        exit_code = run_send("Hi", ["signature"], path)

        assert exit_code == 0
        out = capsys.readouterr().out
        assert "POPUP" in out
        assert "Sample signature Hi" in out

    def test_failed_delivery_exit_code(self, tmp_path):
        path = tmp_path / "pipeline.json"
        path.write_text(json.dumps({"strategies": [{"type": "popup", "fail_rate": 1.0}]}))

        assert run_send("Hi", [], path) == 1

    def test_invalid_config(self, tmp_path, capsys):
        path = tmp_path / "pipeline.json"
        path.write_text(json.dumps({"strategies": [{"type": "email"}]}))

        assert run_send("Hi", [], path) == 1
        assert "Error" in capsys.readouterr().out
