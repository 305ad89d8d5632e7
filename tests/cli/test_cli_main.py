# Copyright 2026 Firefly Software Solutions Inc
# SPDX-License-Identifier: Apache-2.0

"""Unit tests for the pagecollect command line."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import pytest

from pagecollect.cli.main import build_run_config, create_parser, main
from pagecollect.collector.parser import Entry
from pagecollect.collector.reporter import Outcome


def _outcome(ok: bool = True, n: int = 2, requested: int = 2, error=None) -> Outcome:
    items = tuple(Entry(str(i), f"Title {i}", f"2026-10-18T10:0{i}:00") for i in range(n))
    return Outcome(
        ok=ok,
        requested=requested,
        collected=n,
        pages=1,
        max_pages=15,
        items=items,
        error=error,
    )


def _run(argv, outcome):
    mock_run = AsyncMock(return_value=outcome)
    with patch("pagecollect.cli.main.run_collection", mock_run):
        code = main(argv)
    return code, mock_run.await_args.args[0]


class TestFlags:
    """Tests for flag parsing and coercion."""

    def _config(self, argv):
        args, _ = create_parser().parse_known_args(argv)
        return build_run_config(args)

    def test_defaults(self):
        config = self._config([])

        assert config.count == 100
        assert config.max_pages == 15
        assert config.headless is True
        assert config.json_output is False

    def test_equals_form(self):
        config = self._config(["--count=30", "--max-pages=4", "--json"])

        assert config.count == 30
        assert config.max_pages == 4
        assert config.json_output is True

    @pytest.mark.parametrize("flag", ["--head", "--headed"])
    def test_head_aliases(self, flag):
        assert self._config([flag]).headless is False

    @pytest.mark.parametrize(
        "argv, count, max_pages",
        [
            (["--count=0"], 100, 15),
            (["--count=-5"], 1, 15),
            (["--count=abc", "--max-pages=xyz"], 100, 15),
            (["--max-pages=0"], 100, 15),
            (["--max-pages=-1"], 100, 1),
        ],
    )
    def test_counts_coerced(self, argv, count, max_pages):
        config = self._config(argv)

        assert config.count == count
        assert config.max_pages == max_pages

    @pytest.mark.parametrize(
        "argv",
        [
            ["--count"],
            ["--max-pages"],
            ["--count", "--max-pages"],
        ],
    )
    def test_bare_count_flags_use_defaults(self, argv):
        config = self._config(argv)

        assert config.count == 100
        assert config.max_pages == 15

    def test_switch_with_value_is_ignored(self):
        config = self._config(["--head=1", "--json=yes"])

        assert config.headless is True
        assert config.json_output is False

    def test_abbreviations_are_not_expanded(self):
        config = self._config(["--cou=7", "--max=2", "--he"])

        assert config.count == 100
        assert config.max_pages == 15
        assert config.headless is True

    def test_flags_override_config_file(self, tmp_path):
        path = tmp_path / "collector.yaml"
        path.write_text("count: 10\nmax_pages: 3\n")

        config = self._config([f"--config={path}", "--count=20"])

        assert config.count == 20
        assert config.max_pages == 3

    def test_start_url(self):
        config = self._config(["--start-url=https://news.ycombinator.com/shownew"])

        assert config.start_url == "https://news.ycombinator.com/shownew"


class TestMain:
    """Tests for main() output and exit codes."""

    def test_text_output_success(self, capsys):
        code, config = _run(["--count=2"], _outcome())

        out = capsys.readouterr().out.splitlines()
        assert code == 0
        assert config.count == 2
        assert out[1] == "    1. 2026-10-18T10:00:00  0  -  Title 0"
        assert out[-2] == "Collected: 2 | Pages: 1 | Dups: 0"
        assert out[-1] == "true"

    def test_json_output_shortfall(self, capsys):
        code, _ = _run(["--json", "--count=5"], _outcome(ok=False, n=2, requested=5))

        data = json.loads(capsys.readouterr().out)
        assert code == 1
        assert data["ok"] is False
        assert data["summary"] == {"requested": 5, "collected": 2, "pages": 1, "maxPages": 15}
        assert "error" not in data

    def test_json_output_hard_failure(self, capsys):
        code, _ = _run(["--json"], _outcome(ok=False, n=0, requested=100, error="net::ERR_FAILED"))

        data = json.loads(capsys.readouterr().out)
        assert code == 1
        assert data["error"] == "net::ERR_FAILED"
        assert data["items"] == []

    def test_text_output_hard_failure(self, capsys):
        code, _ = _run([], _outcome(ok=False, n=0, requested=100, error="net::ERR_FAILED"))

        captured = capsys.readouterr()
        assert code == 1
        assert captured.out.splitlines() == ["false"]
        assert "net::ERR_FAILED" in captured.err

    def test_unknown_arguments_are_ignored(self):
        code, config = _run(["--count=3", "--verbose-please"], _outcome(n=3, requested=3))

        assert code == 0
        assert config.count == 3

    def test_bad_config_file_exits_with_error(self, tmp_path, capsys):
        mock_run = AsyncMock()
        with patch("pagecollect.cli.main.run_collection", mock_run):
            code = main([f"--config={tmp_path / 'missing.yaml'}", "--json"])

        data = json.loads(capsys.readouterr().out)
        assert code == 1
        assert data["ok"] is False
        assert "not found" in data["error"]
        mock_run.assert_not_called()

    @pytest.mark.parametrize(
        "argv",
        [
            ["--count"],
            ["--max-pages"],
            ["--head=1"],
            ["--co=5"],
            ["--log-level=loud"],
        ],
    )
    def test_malformed_flags_do_not_exit(self, argv):
        code, config = _run(argv, _outcome(n=2, requested=2))

        assert code == 0
        assert config.count == 100
