"""
Tests for the dirprobe command line
"""

from typer.testing import CliRunner

from dirprobe import main
from dirprobe.errors import ProbeError
from dirprobe.models import VERSION, ScanResult

runner = CliRunner()


def _fake_scan(calls, result):
    async def fake_scan(config, words):
        calls.append((config, words))
        print("[1712345678] 200 len=10  http://h/admin")
        return result
    return fake_scan


class TestCli:

    def test_version(self):
        result = runner.invoke(main.app, ["--version"])
        assert result.exit_code == 0
        assert VERSION in result.output

    def test_bad_base_rejected(self, wordlist_file):
        result = runner.invoke(main.app, ["example.com", "-w", str(wordlist_file)])
        assert result.exit_code == 2
        assert "http:// or https://" in result.output

    def test_zero_concurrency_rejected(self, wordlist_file):
        result = runner.invoke(main.app, ["http://h", "-w", str(wordlist_file), "-c", "0"])
        assert result.exit_code == 2
        assert "concurrency" in result.output

    def test_missing_wordlist(self, tmp_path):
        result = runner.invoke(main.app, ["http://h", "-w", str(tmp_path / "nope.txt")])
        assert result.exit_code == 1
        assert "cannot read wordlist" in result.output

    def test_successful_scan(self, monkeypatch, wordlist_file):
        calls = []
        monkeypatch.setattr(main, "scan", _fake_scan(calls, ScanResult(targets=5, dispatched=5, found=1)))

        result = runner.invoke(
            main.app,
            ["http://h", "-w", str(wordlist_file), "-c", "7", "--get", "--timeout", "3", "--exts", "php,.bak"],
        )

        assert result.exit_code == 0
        assert "200 len=10  http://h/admin" in result.output
        config, words = calls[0]
        assert config.base == "http://h/"
        assert config.concurrency == 7
        assert config.prefer_get is True
        assert config.timeout == 3.0
        assert config.extensions == [".php", ".bak"]
        assert words == ["admin", "secret/", "notes.txt", "/private"]

    def test_failed_scan_exits_non_zero(self, monkeypatch, wordlist_file):
        err = ProbeError("http://h/admin", ConnectionRefusedError("connection refused"))
        monkeypatch.setattr(main, "scan", _fake_scan([], ScanResult(failed=1, error=err)))

        result = runner.invoke(main.app, ["http://h", "-w", str(wordlist_file)])

        assert result.exit_code == 1
        assert "http error for http://h/admin" in result.output
