"""Tests for command-line handling."""

from pathlib import Path
from unittest.mock import patch

from jsonpage import cli
from jsonpage.settings import Settings


class TestSettingsFromArgs:

    def test_defaults_keep_base(self):
        base = Settings(port=9000)

        settings = cli.settings_from_args(cli.build_parser().parse_args([]), base)

        assert settings == base
        assert settings.ai_design is False

    def test_ai_design_switch(self):
        args = cli.build_parser().parse_args(["--ai-design"])

        assert cli.settings_from_args(args, Settings()).ai_design is True

    def test_overrides(self):
        args = cli.build_parser().parse_args(
            ["--host", "127.0.0.1", "--port", "8181", "--components-dir", "themes", "--content-dir", "site"]
        )

        settings = cli.settings_from_args(args, Settings())

        assert settings.host == "127.0.0.1"
        assert settings.port == 8181
        assert settings.components_dir == Path("themes")
        assert settings.cache_dir == Path("themes/cached")
        assert settings.content_dir == Path("site")


class TestMain:

    def test_runs_uvicorn(self):
        with patch.object(cli, "load_settings_from_env", return_value=Settings(log_format="text")), \
                patch.object(cli.uvicorn, "run") as run:
            cli.main(["--ai-design", "--port", "8282"])

        run.assert_called_once()
        _, kwargs = run.call_args
        assert kwargs["port"] == 8282
        assert run.call_args[0][0].state.settings.ai_design is True
