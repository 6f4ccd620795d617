"""Tests for CLI entry point."""

from click.testing import CliRunner

from csscalc.cli import main


class TestCLI:
    def test_version_flag(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_resolve(self):
        runner = CliRunner()
        result = runner.invoke(main, ["resolve", "calc(1px + 2px)"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "3px"

    def test_resolve_specified_value(self):
        runner = CliRunner()
        result = runner.invoke(main, ["resolve", "calc(1px + 2px)", "--format", "specified-value"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "calc(3px)"

    def test_resolve_with_var(self):
        runner = CliRunner()
        result = runner.invoke(main, ["resolve", "calc(var(--gap) * 2)", "--var=--gap=8px"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "16px"

    def test_resolve_with_unit(self):
        runner = CliRunner()
        result = runner.invoke(main, ["resolve", "calc(2em + 1px)", "--unit", "em=16"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "33px"

    def test_resolve_with_config(self, tmp_path):
        config = tmp_path / ".csscalc.yaml"
        config.write_text('custom_properties:\n  "--gap": 4px\ndimensions:\n  rem: 10\n')
        runner = CliRunner()
        result = runner.invoke(
            main, ["resolve", "calc(var(--gap) + 1rem)", "--config", str(config)]
        )
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "14px"

    def test_cli_var_overrides_config(self, tmp_path):
        config = tmp_path / ".csscalc.yaml"
        config.write_text('custom_properties:\n  "--gap": 4px\n')
        runner = CliRunner()
        result = runner.invoke(
            main,
            ["resolve", "calc(var(--gap) * 2)", "--config", str(config), "--var=--gap=1px"],
        )
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "2px"

    def test_invalid_config(self, tmp_path):
        config = tmp_path / "bad.yaml"
        config.write_text("units: px\n")
        runner = CliRunner()
        result = runner.invoke(main, ["resolve", "calc(1px)", "--config", str(config)])
        assert result.exit_code != 0
        assert "Error" in result.output

    def test_missing_config(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(
            main, ["resolve", "calc(1px)", "--config", str(tmp_path / "missing.yaml")]
        )
        assert result.exit_code != 0

    def test_unknown_warning_code(self):
        runner = CliRunner()
        result = runner.invoke(main, ["resolve", "calc(1px)", "--warn-as-error", "W99"])
        assert result.exit_code != 0
        assert "Unknown warning code" in result.output

    def test_warn_as_error(self):
        runner = CliRunner()
        result = runner.invoke(
            main, ["resolve", "calc(var(--x) + 1px)", "--warn-as-error", "W02"]
        )
        assert result.exit_code != 0
        assert "W02" in result.output

    def test_suppress_warning(self):
        runner = CliRunner()
        result = runner.invoke(
            main, ["resolve", "calc(var(--x) + 1px)", "--suppress-warning", "W02"]
        )
        assert result.exit_code == 0, result.output
        assert result.output.strip() == ""

    def test_bad_unit_value(self):
        runner = CliRunner()
        result = runner.invoke(main, ["resolve", "calc(1em)", "--unit", "em=big"])
        assert result.exit_code == 2
        assert "not a number" in result.output

    def test_bad_var_pair(self):
        runner = CliRunner()
        result = runner.invoke(main, ["resolve", "calc(1px)", "--var", "gap"])
        assert result.exit_code == 2

    def test_undashed_var_name(self):
        runner = CliRunner()
        result = runner.invoke(main, ["resolve", "calc(1px)", "--var", "gap=1px"])
        assert result.exit_code != 0
        assert "--" in result.output

    def test_serialize(self):
        runner = CliRunner()
        result = runner.invoke(main, ["serialize", "calc(1px + 50%)"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "calc(50% + 1px)"

    def test_serialize_plain_value(self):
        runner = CliRunner()
        result = runner.invoke(main, ["serialize", "1px"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "1px"

    def test_list_warnings(self):
        runner = CliRunner()
        result = runner.invoke(main, ["warnings"])
        assert result.exit_code == 0, result.output
        lines = result.output.strip().splitlines()
        assert [line.split()[0] for line in lines] == ["W01", "W02", "W03"]

    def test_config_warn_as_error(self, tmp_path):
        config = tmp_path / ".csscalc.yaml"
        config.write_text("warn_as_error: [W03]\n")
        runner = CliRunner()
        result = runner.invoke(main, ["resolve", "calc(1px / 0)", "--config", str(config)])
        assert result.exit_code != 0
        assert "W03" in result.output

    def test_cli_policy_replaces_config_policy(self, tmp_path):
        config = tmp_path / ".csscalc.yaml"
        config.write_text("warn_as_error: [W03]\n")
        runner = CliRunner()
        result = runner.invoke(
            main,
            ["resolve", "calc(1px / 0)", "--config", str(config), "--suppress-warning", "W03"],
        )
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "calc(Infinity * 1px)"
