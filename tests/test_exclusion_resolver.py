"""Tests for folding shaded jar manifests into exclusion patterns."""

import itertools
from unittest.mock import MagicMock

import pytest

from exclusion.errors import ManifestMissing, ManifestUnreadable, ReferenceUnresolvable
from exclusion.models import (
    BundleManifest,
    BundleReference,
    Coordinate,
    ExclusionSet,
    ManifestFormat,
    ProjectDependencySet,
    VersionedComponent,
)
from exclusion.resolver import ExclusionResolver, resolve

BUNDLE_A = BundleReference("com.acme", "platform-shaded", "1.0")
BUNDLE_B = BundleReference("com.acme", "client-shaded", "2.0", "all")


def deps(*coords):
    """Build a ProjectDependencySet from coordinate strings."""
    return ProjectDependencySet(VersionedComponent.parse(c) for c in coords)


@pytest.fixture
def jars(make_jar):
    """Fetcher over a dict of reference -> jar path, filled in by each test."""
    archives = {}

    def fetch(ref):
        return archives.get(ref)

    return archives, fetch


def test_equal_version_is_excluded(make_jar, jars):
    archives, fetch = jars
    archives[BUNDLE_A] = make_jar(included=["org.foo:bar:jar:1.2"])

    result = resolve(deps("org.foo:bar:jar:1.2"), [BUNDLE_A], fetch)

    assert result.patterns == ["org.foo:bar:*"]


def test_different_version_is_kept(make_jar, jars):
    archives, fetch = jars
    archives[BUNDLE_A] = make_jar(included=["org.foo:bar:jar:1.2"])

    result = resolve(deps("org.foo:bar:jar:1.3"), [BUNDLE_A], fetch)

    assert result.patterns == []
    assert not result


def test_version_comparison_is_exact_string(make_jar, jars):
    archives, fetch = jars
    archives[BUNDLE_A] = make_jar(included=["org.foo:bar:jar:1.2", "org.foo:baz:jar:2.0.0"])

    result = resolve(deps("org.foo:bar:jar:1.2.0", "org.foo:baz:jar:2.0"), [BUNDLE_A], fetch)

    assert result.patterns == []


def test_bundle_only_components_are_ignored(make_jar, jars):
    archives, fetch = jars
    archives[BUNDLE_A] = make_jar(included=["org.foo:bar:jar:1.2", "org.unused:lib:jar:4.0"])

    result = resolve(deps("org.foo:bar:jar:1.2"), [BUNDLE_A], fetch)

    assert "org.unused:lib:*" not in result
    assert result.patterns == ["org.foo:bar:*"]


def test_classifier_and_type_are_part_of_identity(make_jar, jars):
    archives, fetch = jars
    archives[BUNDLE_A] = make_jar(included=[
        "org.foo:native:jar:linux:1.0",
        "org.foo:bar:test-jar:1.2",
    ])

    result = resolve(deps("org.foo:native:jar:osx:1.0", "org.foo:bar:jar:1.2"), [BUNDLE_A], fetch)

    assert result.patterns == []


def test_classifier_match_excludes(make_jar, jars):
    archives, fetch = jars
    archives[BUNDLE_A] = make_jar(included=["org.foo:native:jar:linux:1.0"])

    result = resolve(deps("org.foo:native:jar:linux:1.0"), [BUNDLE_A], fetch)

    assert result.patterns == ["org.foo:native:*"]


def test_pattern_deduplicated_across_bundles(make_jar, jars, caplog):
    archives, fetch = jars
    archives[BUNDLE_A] = make_jar("a.jar", included=["org.foo:bar:jar:1.2"])
    archives[BUNDLE_B] = make_jar("b.jar", included=["org.foo:bar:jar:1.2"])

    with caplog.at_level("INFO"):
        result = resolve(deps("org.foo:bar:jar:1.2"), [BUNDLE_A, BUNDLE_B], fetch)

    assert result.patterns == ["org.foo:bar:*"]
    assert result.origin_of("org.foo:bar:*") == str(archives[BUNDLE_A])
    assert caplog.text.count("Excluding from shaded jar: org.foo:bar:*") == 1


def test_output_is_sorted(make_jar, jars):
    archives, fetch = jars
    archives[BUNDLE_A] = make_jar(included=[
        "org.zeta:z:jar:1",
        "com.alpha:a:jar:1",
        "org.mid:m:jar:1",
    ])

    result = resolve(deps("org.zeta:z:jar:1", "com.alpha:a:jar:1", "org.mid:m:jar:1"), [BUNDLE_A], fetch)

    assert result.render() == "com.alpha:a:*,org.mid:m:*,org.zeta:z:*"


def test_pom_properties_bundle(make_jar, jars):
    archives, fetch = jars
    archives[BUNDLE_A] = make_jar(poms=[("org.foo", "bar", "1.2", {}), ("org.foo", "baz", "1.0", {})])

    result = resolve(deps("org.foo:bar:jar:1.2", "org.foo:baz:jar:1.1"), [BUNDLE_A], fetch)

    assert result.patterns == ["org.foo:bar:*"]


def test_order_independent_and_idempotent(make_jar, jars):
    archives, fetch = jars
    archives[BUNDLE_A] = make_jar("a.jar", included=["org.foo:bar:jar:1.2", "org.foo:baz:jar:1.0"])
    archives[BUNDLE_B] = make_jar("b.jar", included=["org.foo:baz:jar:1.0", "org.x:y:jar:3"])
    project = deps("org.foo:bar:jar:1.2", "org.foo:baz:jar:1.0", "org.x:y:jar:3")

    results = [resolve(project, list(order), fetch) for order in itertools.permutations([BUNDLE_A, BUNDLE_B])]
    results.append(resolve(project, [BUNDLE_A, BUNDLE_B], fetch))

    assert all(r == results[0] for r in results)
    assert results[0].patterns == ["org.foo:bar:*", "org.foo:baz:*", "org.x:y:*"]


def test_empty_references_yield_empty_set():
    fetch = MagicMock()

    result = resolve(deps("org.foo:bar:jar:1.2"), [], fetch)

    assert result == ExclusionSet()
    fetch.assert_not_called()


def test_malformed_lines_do_not_abort(make_jar, jars):
    archives, fetch = jars
    archives[BUNDLE_A] = make_jar(included=["bad:line:1", "org.foo:bar:jar:1.2", "a:b:c:d:e:f"])

    result = resolve(deps("org.foo:bar:jar:1.2"), [BUNDLE_A], fetch)

    assert result.patterns == ["org.foo:bar:*"]


class TestFatalErrors:
    """Fatal conditions abort the whole run."""

    def test_fetch_returning_none(self):
        with pytest.raises(ReferenceUnresolvable) as exc_info:
            resolve(deps("org.foo:bar:jar:1.2"), [BUNDLE_A], lambda ref: None)
        assert exc_info.value.reference == BUNDLE_A
        assert "artifactId=platform-shaded" in str(exc_info.value)

    def test_fetch_raising_os_error(self):
        def fetch(ref):
            raise FileNotFoundError("gone")

        with pytest.raises(ReferenceUnresolvable) as exc_info:
            resolve(deps("org.foo:bar:jar:1.2"), [BUNDLE_A], fetch)
        assert "gone" in str(exc_info.value)

    def test_fetch_raising_unresolvable_propagates_unchanged(self):
        error = ReferenceUnresolvable(BUNDLE_A, "offline")
        fetch = MagicMock(side_effect=error)

        with pytest.raises(ReferenceUnresolvable) as exc_info:
            resolve(deps(), [BUNDLE_A], fetch)
        assert exc_info.value is error

    def test_missing_manifest_stops_run(self, make_jar, jars):
        archives, fetch = jars
        archives[BUNDLE_A] = make_jar("a.jar", included=["org.foo:bar:jar:1.2"])
        archives[BUNDLE_B] = make_jar("b.jar", entries={"Main.class": b"\x00"})

        with pytest.raises(ManifestMissing):
            resolve(deps("org.foo:bar:jar:1.2"), [BUNDLE_A, BUNDLE_B], fetch)

    def test_unreadable_archive_stops_run(self, tmp_path):
        bogus = tmp_path / "bogus.jar"
        bogus.write_bytes(b"garbage")

        with pytest.raises(ManifestUnreadable):
            resolve(deps("org.foo:bar:jar:1.2"), [BUNDLE_A], lambda ref: str(bogus))


class TestExclusionResolver:
    """Resolver with an injected manifest reader."""

    def test_uses_injected_reader(self):
        manifest = BundleManifest(
            "fake.jar",
            ManifestFormat.POM_PROPERTIES,
            [VersionedComponent(Coordinate("org.foo", "bar"), "1.2")],
        )
        read = MagicMock(return_value=manifest)
        resolver = ExclusionResolver(lambda ref: "fake.jar", read=read)

        result = resolver.resolve(deps("org.foo:bar:jar:1.2"), [BUNDLE_A])

        read.assert_called_once_with("fake.jar")
        assert result.patterns == ["org.foo:bar:*"]
        assert result.origin_of("org.foo:bar:*") == "fake.jar"

    def test_references_fetched_in_order(self):
        calls = []
        empty = BundleManifest("x", ManifestFormat.INCLUDED_ARTIFACTS_LIST)

        def fetch(ref):
            calls.append(ref)
            return "x"

        ExclusionResolver(fetch, read=lambda archive: empty).resolve(deps(), [BUNDLE_B, BUNDLE_A])

        assert calls == [BUNDLE_B, BUNDLE_A]
