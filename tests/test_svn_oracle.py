"""Tests for the Subversion oracle, with svn replaced by canned output."""

import subprocess

import pytest

from svbisect.oracle import OracleError, SvnOracle, UpdateFailed
from svbisect.oracle.svn import parse_log_entries


INFO_XML = """<?xml version="1.0" encoding="UTF-8"?>
<info>
<entry kind="dir" path="." revision="120">
<url>https://svn.example.org/repo/trunk</url>
<wc-info>
<wcroot-abspath>/work/trunk</wcroot-abspath>
</wc-info>
<commit revision="95">
<author>alice</author>
<date>2024-03-01T10:00:00.000000Z</date>
</commit>
</entry>
</info>
"""

LOG_XML = """<?xml version="1.0" encoding="UTF-8"?>
<log>
<logentry revision="95">
<author>alice</author>
<date>2024-03-01T10:00:00.000000Z</date>
<paths>
<path action="M" kind="file">/trunk/main.c</path>
<path action="A" kind="file">/trunk/util.c</path>
</paths>
<msg>Fix overflow in parser

Longer description.</msg>
</logentry>
<logentry revision="90">
<author>bob</author>
<date>2024-02-28T09:00:00.000000Z</date>
<msg>Refactor</msg>
</logentry>
</log>
"""

EMPTY_LOG_XML = '<?xml version="1.0" encoding="UTF-8"?>\n<log>\n</log>\n'


class FakeSvn:
    """Stands in for subprocess.run, answering by svn subcommand."""

    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def __call__(self, cmd, cwd=None, capture_output=False, text=False, check=False):
        self.calls.append(cmd)
        returncode, stdout = self.responses.get(cmd[1], (0, ""))
        return subprocess.CompletedProcess(cmd, returncode, stdout, "svn: E000000: failure\n")


@pytest.fixture
def svn(monkeypatch):
    fake = FakeSvn({"info": (0, INFO_XML), "log": (0, LOG_XML), "update": (0, "")})
    monkeypatch.setattr("svbisect.oracle.svn.subprocess.run", fake)
    return fake


def test_parse_log_entries():
    """Test that log XML yields revisions, messages and changed paths."""
    entries = parse_log_entries(LOG_XML)

    assert [entry.revision for entry in entries] == [95, 90]
    assert entries[0].author == "alice"
    assert entries[0].message == ["Fix overflow in parser", "", "Longer description."]
    assert entries[0].first_line == "Fix overflow in parser"
    assert entries[0].paths == [("M", "/trunk/main.c"), ("A", "/trunk/util.c")]
    assert entries[1].paths == []


def test_parse_log_entries_invalid_xml():
    with pytest.raises(OracleError):
        parse_log_entries("<log><logentry>")


def test_current_revision_and_root(svn):
    oracle = SvnOracle(cwd="/work/trunk")

    assert oracle.current_revision() == 95
    assert oracle.working_copy_root() == "/work/trunk"
    assert svn.calls[0] == ["svn", "info", "--xml", "."]


def test_not_a_working_copy(svn):
    svn.responses["info"] = (1, "")
    oracle = SvnOracle()

    with pytest.raises(OracleError, match="Not a subversion working copy"):
        oracle.working_copy_root()


def test_resolve_number(svn):
    oracle = SvnOracle()

    assert oracle.resolve("95") == 95
    assert svn.calls[-1] == ["svn", "log", "--xml", "--quiet", "--revision=95", "."]


def test_resolve_symbolic(svn):
    """Test that keywords are resolved with a range and a limit."""
    oracle = SvnOracle()

    assert oracle.resolve("HEAD") == 95
    assert svn.calls[-1] == ["svn", "log", "--xml", "--quiet", "--revision=HEAD:0", "--limit=1", "."]


def test_resolve_outside_history(svn):
    oracle = SvnOracle()

    svn.responses["log"] = (0, EMPTY_LOG_XML)
    assert oracle.resolve("12") is None

    svn.responses["log"] = (1, "")
    assert oracle.resolve("999999") is None

    assert oracle.resolve("r12") is None


def test_history(svn):
    oracle = SvnOracle()

    assert oracle.history(95, 90) == [95, 90]
    assert svn.calls[-1] == ["svn", "log", "--xml", "--quiet", "--revision=95:90", "."]


def test_log_entry_with_paths(svn):
    oracle = SvnOracle()

    entry = oracle.log_entry(95, with_paths=True)

    assert entry.revision == 95
    assert "--verbose" in svn.calls[-1]
    assert oracle.first_log_line(95) == "Fix overflow in parser"


def test_move_working_copy(svn):
    oracle = SvnOracle(command="/opt/svn/bin/svn")

    oracle.move_working_copy_to(90)

    assert svn.calls[-1] == ["/opt/svn/bin/svn", "update", "--revision=90"]


def test_move_working_copy_failure(svn):
    svn.responses["update"] = (1, "")
    oracle = SvnOracle()

    with pytest.raises(UpdateFailed) as excinfo:
        oracle.move_working_copy_to(90)

    assert excinfo.value.revision == 90


def test_missing_svn_executable(monkeypatch):
    def missing(*args, **kwargs):
        raise FileNotFoundError("svn")

    monkeypatch.setattr("svbisect.oracle.svn.subprocess.run", missing)

    with pytest.raises(OracleError, match="Cannot run"):
        SvnOracle().current_revision()


def test_public_methods_are_documented():
    """Test that the oracle's public methods carry docstrings."""
    methods = [
        getattr(SvnOracle, name)
        for name in dir(SvnOracle)
        if not name.startswith("_") and callable(getattr(SvnOracle, name))
    ]
    assert methods
    assert all(method.__doc__ for method in methods)
