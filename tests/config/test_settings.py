"""Tests for StowrSettings — unified settings with TOML source."""

from pathlib import Path

import click
import pytest

from stowr.config.settings import StowrSettings


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        """With no TOML and no env vars, all fields use code defaults."""
        settings = StowrSettings.from_cli(project_root=tmp_path)
        assert settings.project_root == tmp_path
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.quiet is False
        assert settings.verbose is False
        assert settings.log_json is False
        assert settings.generate.output_suffix == "_gen.py"

    def test_frozen(self, tmp_path: Path) -> None:
        settings = StowrSettings.from_cli(project_root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        toml = tmp_path / "stowr.toml"
        toml.write_text("[generate]\nheader = false\n")
        settings = StowrSettings.from_cli(project_root=tmp_path)
        assert settings.generate.header is False
        assert settings.generate.output_suffix == "_gen.py"  # default preserved
        assert settings.config_path == toml

    def test_project_root_follows_discovered_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "stowr.toml").write_text("")
        child = tmp_path / "src" / "app"
        child.mkdir(parents=True)
        monkeypatch.chdir(child)
        settings = StowrSettings.from_cli()
        assert settings.project_root == tmp_path.resolve()

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text('[generate]\noutput_suffix = "_x.py"\n')
        settings = StowrSettings.from_cli(config_path=str(custom), project_root=tmp_path)
        assert settings.generate.output_suffix == "_x.py"
        assert settings.config_path == custom

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "stowr.toml").write_text("[generate\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            StowrSettings.from_cli(project_root=tmp_path)


class TestEnvAndFlags:
    def test_env_overrides_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STOWR_GENERATE__OUTPUT_SUFFIX", "_env.py")
        settings = StowrSettings.from_cli(project_root=tmp_path)
        assert settings.generate.output_suffix == "_env.py"

    def test_cli_flags_override(self, tmp_path: Path) -> None:
        settings = StowrSettings.from_cli(
            project_root=tmp_path, json_output=True, quiet=True, verbose=True
        )
        assert settings.json_output is True
        assert settings.quiet is True
        assert settings.verbose is True

    def test_cli_flags_override_toml(self, tmp_path: Path) -> None:
        (tmp_path / "stowr.toml").write_text("verbose = true\n")
        settings = StowrSettings.from_cli(project_root=tmp_path, verbose=False)
        assert settings.verbose is False


class TestResolveTemplateDir:
    def test_none_by_default(self, tmp_path: Path) -> None:
        assert StowrSettings.from_cli(project_root=tmp_path).resolve_template_dir() is None

    def test_relative_to_project_root(self, tmp_path: Path) -> None:
        (tmp_path / "stowr.toml").write_text('[generate]\ntemplate_dir = "templates"\n')
        settings = StowrSettings.from_cli(project_root=tmp_path)
        assert settings.resolve_template_dir() == tmp_path / "templates"

    def test_absolute_kept(self, tmp_path: Path) -> None:
        absolute = tmp_path / "abs"
        (tmp_path / "stowr.toml").write_text(f'[generate]\ntemplate_dir = "{absolute.as_posix()}"\n')
        settings = StowrSettings.from_cli(project_root=tmp_path)
        assert settings.resolve_template_dir() == absolute
