"""Tests for the autofit command line."""

import json

import pytest
from PIL import features

from autofit.cli import EXIT_UNSATISFIABLE, build_parser, main

requires_freetype = pytest.mark.skipif(
    not features.check("freetype2"),
    reason="Pillow built without FreeType",
)


class TestParser:
    """Tests for argument parsing."""

    def test_defaults_from_settings(self):
        args = build_parser().parse_args(["Hi", "--width", "100", "--height", "40"])

        assert args.min_size == 8
        assert args.max_size == 500
        assert args.max_lines is None
        assert args.wrap == "word"

    def test_box_is_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["Hi"])

    def test_settings_env_changes_defaults(self, monkeypatch):
        monkeypatch.setenv("AUTOFIT_DEFAULT_MAX_FONT_SIZE", "90")
        args = build_parser().parse_args(["Hi", "--width", "100", "--height", "40"])

        assert args.max_size == 90


class TestMain:
    """Tests for running the command."""

    @requires_freetype
    def test_fitted(self, capsys):
        code = main(["Hello World", "--width", "200", "--height", "60", "--max-size", "72"])
        output = json.loads(capsys.readouterr().out)

        assert code == 0
        assert output["outcome"] == "fitted_within_range"
        assert 8 <= output["font_size"] <= 72
        assert output["rendered_height"] <= 61
        assert output["line_count"] == len(output["lines"])

    @requires_freetype
    def test_unsatisfiable_exit_code(self, capsys):
        code = main(["A long sentence that cannot fit", "--width", "5", "--height", "5"])
        output = json.loads(capsys.readouterr().out)

        assert code == EXIT_UNSATISFIABLE
        assert output["outcome"] == "unsatisfiable"
        assert output["font_size"] == 8

    @requires_freetype
    def test_escaped_newlines(self, capsys):
        main(["one\\ntwo", "--width", "400", "--height", "200", "--max-size", "30"])
        output = json.loads(capsys.readouterr().out)

        assert output["lines"] == ["one", "two"]

    def test_empty_text(self, capsys):
        code = main(["", "--width", "200", "--height", "60", "--min-size", "14", "--max-size", "20"])
        output = json.loads(capsys.readouterr().out)

        assert code == 0
        assert output == {"font_size": 14, "outcome": "fitted_within_range", "probes": 0}

    def test_invalid_range_is_usage_error(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["Hi", "--width", "100", "--height", "40", "--min-size", "30", "--max-size", "10"])

        assert exc_info.value.code == 2
        assert "max_size" in capsys.readouterr().err
