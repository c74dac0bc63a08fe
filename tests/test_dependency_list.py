"""Tests for loading the project's resolved dependency list."""

import pytest

from exclusion.dependencies import load_dependencies, parse_dependency_lines
from exclusion.errors import DependencyListError
from exclusion.models import Coordinate

MVN_OUTPUT = """\
[INFO] Scanning for projects...
[INFO]
[INFO] --- maven-dependency-plugin:3.6.1:list (default-cli) @ app ---
[INFO]
[INFO] The following files have been resolved:
[INFO]    org.foo:bar:jar:1.2:compile -- module bar
[INFO]    org.foo:native:jar:linux:1.0:runtime
[INFO]    org.foo:opt:jar:0.9:compile (optional)
[INFO]    junit:junit:jar:4.13.2:test
[INFO]    javax.servlet:servlet-api:jar:2.5:provided
[INFO]
[INFO] BUILD SUCCESS
"""

OUTPUT_FILE = """\

The following files have been resolved:
   org.foo:bar:jar:1.2:compile
   none
"""


class TestDependencyListFormat:
    """Output of mvn dependency:list."""

    def test_runtime_scopes_by_default(self):
        project = parse_dependency_lines(MVN_OUTPUT.splitlines())

        assert project.version_of(Coordinate("org.foo", "bar")) == "1.2"
        assert project.version_of(Coordinate("org.foo", "native", "jar", "linux")) == "1.0"
        assert project.version_of(Coordinate("org.foo", "opt")) == "0.9"
        assert Coordinate("junit", "junit") not in project
        assert Coordinate("javax.servlet", "servlet-api") not in project
        assert len(project) == 3

    def test_explicit_scopes(self):
        project = parse_dependency_lines(MVN_OUTPUT.splitlines(), scopes=["test"])

        assert list(project) == [Coordinate("junit", "junit")]

    def test_empty_scopes_keep_everything(self):
        project = parse_dependency_lines(MVN_OUTPUT.splitlines(), scopes=[])

        assert len(project) == 5

    def test_output_file_layout(self):
        project = parse_dependency_lines(OUTPUT_FILE.splitlines())

        assert list(project.items()) == [(Coordinate("org.foo", "bar"), "1.2")]


class TestCoordinatesFormat:
    """Bare group:name:type[:classifier]:version lines."""

    def test_parses_and_skips_malformed(self, caplog):
        lines = ["# resolved", "org.foo:bar:jar:1.2", "", "org.foo:baz:jar:tests:2.0", "broken:line"]

        with caplog.at_level("WARNING"):
            project = parse_dependency_lines(lines, fmt="coordinates")

        assert project.version_of(Coordinate("org.foo", "bar")) == "1.2"
        assert project.version_of(Coordinate("org.foo", "baz", "jar", "tests")) == "2.0"
        assert len(project) == 2
        assert "broken:line" in caplog.text


def test_unknown_format():
    with pytest.raises(DependencyListError):
        parse_dependency_lines([], fmt="gradle")


def test_load_from_file(tmp_path):
    path = tmp_path / "deps.txt"
    path.write_text(MVN_OUTPUT, encoding="utf-8")

    project = load_dependencies(str(path))

    assert len(project) == 3


def test_load_missing_file(tmp_path):
    with pytest.raises(DependencyListError) as exc_info:
        load_dependencies(str(tmp_path / "absent.txt"))
    assert "absent.txt" in str(exc_info.value)
