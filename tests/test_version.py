import argparse
import json

import pytest
import yaml

from clusternet.version import (
    VersionInfo,
    add_version_flag,
    format_version,
    print_and_exit_if_requested,
)


@pytest.fixture
def parser():
    p = argparse.ArgumentParser()
    add_version_flag(p)
    return p


def test_flag_without_value_means_short(parser):
    assert parser.parse_args(["--version"]).version == "short"


def test_flag_absent_is_empty(parser):
    assert parser.parse_args([]).version == ""


def test_flag_with_value(parser):
    assert parser.parse_args(["--version=json"]).version == "json"


def test_short_format():
    info = VersionInfo(git_version="v1.2.3")
    assert format_version("prog", "short", info) == "prog version: v1.2.3"


def test_empty_format_prints_nothing():
    assert format_version("prog", "", VersionInfo()) is None


def test_json_round_trip():
    info = VersionInfo(git_version="v1.2.3", git_commit="abc")
    data = json.loads(format_version("prog", "json", info))
    assert data == info.to_dict("prog")
    assert data["programName"] == "prog"
    assert data["gitVersion"] == "v1.2.3"


def test_yaml_round_trip():
    info = VersionInfo(major="1", minor="2")
    data = yaml.safe_load(format_version("prog", "yaml", info))
    assert data == info.to_dict("prog")


def test_invalid_format():
    with pytest.raises(ValueError, match="invalid output format"):
        format_version("prog", "xml", VersionInfo())


def test_print_and_exit(capsys):
    info = VersionInfo(git_version="v9")
    with pytest.raises(SystemExit) as excinfo:
        print_and_exit_if_requested("prog", "short", info)
    assert excinfo.value.code == 0
    assert capsys.readouterr().out == "prog version: v9\n"


def test_no_exit_when_not_requested(capsys):
    assert print_and_exit_if_requested("prog", "", VersionInfo()) is None
    assert capsys.readouterr().out == ""


def test_invalid_format_does_not_exit():
    with pytest.raises(ValueError):
        print_and_exit_if_requested("prog", "bogus", VersionInfo())