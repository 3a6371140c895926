"""Tests for configuration loading."""

import pytest

from svbisect.config import BisectConfig, create_bisect_config


def test_defaults():
    config = create_bisect_config(None)

    assert config == BisectConfig()
    assert config.svn_command == "svn"
    assert config.state_dir == ".svn/tmp"
    assert config.max_iterations == 1000
    assert config.max_same_revision == 3


def test_sections_override_defaults():
    config = create_bisect_config(
        {
            "svn": {"command": "/usr/local/bin/svn"},
            "state": {"dir": ".svn/bisect", "database": "state.db", "log": "bisect.log"},
            "run": {"max_iterations": 50},
            "script_name": "svb",
        }
    )

    assert config.svn_command == "/usr/local/bin/svn"
    assert config.state_dir == ".svn/bisect"
    assert config.db_name == "state.db"
    assert config.log_name == "bisect.log"
    assert config.max_iterations == 50
    assert config.max_same_revision == 3
    assert config.script_name == "svb"


@pytest.mark.parametrize("value", [0, -1, "ten"])
def test_invalid_limits(value):
    with pytest.raises(ValueError, match="max_same_revision"):
        create_bisect_config({"run": {"max_same_revision": value}})
