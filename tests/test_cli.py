import json
import os
import subprocess
import sys

from click.testing import CliRunner

from blockmap.cli import cli

FIXTURES = os.path.join(os.path.dirname(__file__), "fixtures")


def test_module_execution():
    """Test that 'python -m blockmap' works."""
    result = subprocess.run(
        [sys.executable, "-m", "blockmap", "--help"],
        capture_output=True,
        text=True
    )
    assert result.returncode == 0
    assert "read" in result.stdout
    assert "schema" in result.stdout


def test_read_json_report(tmp_path, fake_aws):
    output_file = tmp_path / "report.json"
    runner = CliRunner()
    result = runner.invoke(cli, [
        "read", os.path.join(FIXTURES, "policy_document.tf"), "--output", str(output_file),
    ])
    assert result.exit_code == 0

    report = json.loads(output_file.read_text(encoding="utf-8"))
    assert report["summary"]["blocks"] == 1
    assert report["summary"]["read"] == 1
    assert report["summary"]["ERROR"] == 0
    outcome = report["outcomes"][0]
    assert outcome["address"] == "data.aws_cloudwatch_log_data_protection_policy_document.example"
    assert json.loads(outcome["state"]["json"])["Name"] == "Example"
    assert outcome["state"]["statement"][0]["data_identifiers"] == sorted(
        outcome["state"]["statement"][0]["data_identifiers"]
    )


def test_read_directory_with_api_data_source(tmp_path, fake_aws):
    output_file = tmp_path / "report.json"
    runner = CliRunner()
    result = runner.invoke(cli, ["read", FIXTURES, "--output", str(output_file)])
    assert result.exit_code == 0

    report = json.loads(output_file.read_text(encoding="utf-8"))
    ids = {o["address"]: o["id"] for o in report["outcomes"]}
    assert ids["data.aws_servicecatalog_provisioning_artifacts.example"] == "prod-abcdzk7xy33qa"
    assert report["summary"]["ERROR"] == 1


def test_fail_on_error(tmp_path, fake_aws):
    runner = CliRunner()
    result = runner.invoke(cli, [
        "read", os.path.join(FIXTURES, "swapped_statements.tf"),
        "--output", str(tmp_path / "report.json"),
        "--fail-on-error",
    ])
    assert result.exit_code == 1


def test_errors_without_gate_exit_zero(tmp_path, fake_aws):
    runner = CliRunner()
    result = runner.invoke(cli, [
        "read", os.path.join(FIXTURES, "swapped_statements.tf"),
        "--output", str(tmp_path / "report.json"),
    ])
    assert result.exit_code == 0


def test_no_files_found(tmp_path):
    runner = CliRunner()
    result = runner.invoke(cli, ["read", str(tmp_path / "nothing-here")])
    assert result.exit_code == 2


def test_no_blocks_found(tmp_path):
    tf = tmp_path / "main.tf"
    tf.write_text('variable "name" {\n  default = "x"\n}\n')
    runner = CliRunner()
    result = runner.invoke(cli, ["read", str(tf)])
    assert result.exit_code == 0


def test_markdown_encoding_and_newline(tmp_path, fake_aws):
    """Test that Markdown report is written with UTF-8 and LF."""
    output_file = tmp_path / "report.md"
    runner = CliRunner()
    result = runner.invoke(cli, [
        "read", os.path.join(FIXTURES, "swapped_statements.tf"),
        "--format", "markdown", "--output", str(output_file),
    ])
    assert result.exit_code == 0

    with open(output_file, "rb") as f:
        content = f.read()
        assert b"\r\n" not in content
        assert b"\n" in content

    text = content.decode("utf-8")
    assert "# Configuration Read Report" in text
    assert "🔴" in text


def test_markdown_ascii_mode(tmp_path, fake_aws):
    output_file = tmp_path / "report.md"
    runner = CliRunner()
    result = runner.invoke(cli, [
        "read", os.path.join(FIXTURES, "swapped_statements.tf"),
        "--format", "markdown", "--ascii", "--output", str(output_file),
    ])
    assert result.exit_code == 0
    text = output_file.read_text(encoding="utf-8")
    assert "[ERROR]" in text
    assert "🔴" not in text


def test_schema_command():
    runner = CliRunner()
    result = runner.invoke(
        cli, ["schema", "aws_servicecatalog_provisioning_artifacts"], env={"COLUMNS": "200"}
    )
    assert result.exit_code == 0
    assert "product_id" in result.output
    assert "required" in result.output


def test_schema_unknown_type():
    runner = CliRunner()
    result = runner.invoke(cli, ["schema", "aws_s3_bucket"])
    assert result.exit_code == 2


def test_import_command(tmp_path, fake_aws):
    fake_aws.get("medialive").add("7654321", Name="imported")
    output_file = tmp_path / "state.json"
    runner = CliRunner()
    result = runner.invoke(cli, [
        "import", "aws_medialive_multiplex", "7654321", "--output", str(output_file),
    ])
    assert result.exit_code == 0
    state = json.loads(output_file.read_text(encoding="utf-8"))
    assert state["id"] == "7654321"
    assert state["name"] == "imported"


def test_import_missing(fake_aws):
    runner = CliRunner()
    result = runner.invoke(cli, ["import", "aws_medialive_multiplex", "gone"])
    assert result.exit_code == 1


def test_read_nested_directory(tmp_path, fake_aws):
    nested = tmp_path / "modules" / "catalog"
    nested.mkdir(parents=True)
    (nested / "main.tf").write_text(
        'data "aws_servicecatalog_provisioning_artifacts" "nested" {\n'
        '  product_id = "prod-nested"\n'
        '}\n'
    )
    (tmp_path / "notes.txt").write_text('data "aws_servicecatalog_provisioning_artifacts" "no" {}\n')
    output_file = tmp_path / "report.json"

    runner = CliRunner()
    result = runner.invoke(cli, ["read", str(tmp_path), "--output", str(output_file)])
    assert result.exit_code == 0

    report = json.loads(output_file.read_text(encoding="utf-8"))
    assert [o["address"] for o in report["outcomes"]] == [
        "data.aws_servicecatalog_provisioning_artifacts.nested",
    ]
    assert report["outcomes"][0]["id"] == "prod-nested"


def test_missing_path_alongside_existing(tmp_path, fake_aws):
    output_file = tmp_path / "report.json"
    runner = CliRunner()
    result = runner.invoke(cli, [
        "read", str(tmp_path / "absent"), os.path.join(FIXTURES, "policy_document.tf"),
        "--output", str(output_file),
    ])
    assert result.exit_code == 0
    report = json.loads(output_file.read_text(encoding="utf-8"))
    assert report["summary"]["blocks"] == 1
