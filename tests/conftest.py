"""Shared fixtures: build small jars on the fly."""

import zipfile

import pytest

from constants import Constants


def _pom_properties(group, artifact, version, **extra):
    lines = ["#Generated by Maven", f"groupId={group}", f"artifactId={artifact}", f"version={version}"]
    lines.extend(f"{key}={value}" for key, value in extra.items())
    return "\n".join(lines) + "\n"


@pytest.fixture
def make_jar(tmp_path):
    """Return a factory writing a jar with the given entries.

    ``included`` becomes the shade plugin's included-artifacts list,
    ``poms`` is a list of (group, artifact, version, extra-props) tuples
    written as META-INF/maven/<g>/<a>/pom.properties.
    """
    def _make(name="bundle.jar", included=None, poms=(), entries=None, directory=None):
        path = (directory or tmp_path) / name
        path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(path, "w") as zf:
            zf.writestr("META-INF/MANIFEST.MF", "Manifest-Version: 1.0\n")
            if included is not None:
                zf.writestr(Constants.SHADED_JAR_CONTENTS_ENTRY, "\n".join(included) + "\n")
            for group, artifact, version, extra in poms:
                zf.writestr(
                    f"META-INF/maven/{group}/{artifact}/pom.properties",
                    _pom_properties(group, artifact, version, **extra),
                )
            for entry, content in (entries or {}).items():
                zf.writestr(entry, content)
        return path

    return _make
