from unittest.mock import patch

from click.testing import CliRunner

from framescope.cli.main import cli
from conftest import FakeDriver, FakeElement


def test_resolve_relative():
    result = CliRunner().invoke(cli, ["resolve", "https://host:8080/app", "bar"])

    assert result.exit_code == 0
    assert "https://host:8080/app/bar" in result.output


def test_resolve_protocol_relative_with_current_url():
    result = CliRunner().invoke(
        cli, ["resolve", "https://host:8080/app", "//cdn.example/x", "--current-url", "http://host/"]
    )

    assert result.exit_code == 0
    assert "http://cdn.example/x" in result.output


def test_resolve_without_urls_fails():
    result = CliRunner().invoke(cli, ["resolve", ""])

    assert result.exit_code == 1
    assert "Error" in result.output


def test_version():
    result = CliRunner().invoke(cli, ["version"])

    assert result.exit_code == 0
    assert "framescope v" in result.output


def test_probe_lists_matches_inside_frame():
    label = FakeElement("label", tag="p", text="inside")
    frame = FakeElement("frame", tag="iframe", frame={"p.label": [label]})
    driver = FakeDriver({"main": {"#content": [frame]}})

    with patch("framescope.core.driver_factory.create_driver", return_value=driver):
        result = CliRunner().invoke(
            cli, ["probe", "https://example.com/", "p.label", "--frame", "#content", "--timeout", "1000"]
        )

    assert result.exit_code == 0, result.output
    assert "1 element(s) matched" in result.output
    assert driver.visited == ["https://example.com/"]
    assert driver.quit_called


def test_probe_reports_missing_selector():
    driver = FakeDriver({"main": {}})

    with patch("framescope.core.driver_factory.create_driver", return_value=driver):
        result = CliRunner().invoke(cli, ["probe", "https://example.com/", ".nope", "--timeout", "600"])

    assert result.exit_code == 1
    assert "Nothing matched '.nope'" in result.output
    assert driver.quit_called
