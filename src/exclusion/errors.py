"""Error taxonomy for exclusion resolution.

Everything fatal derives from ShadeDiffError so callers can stop the build
with a single except clause. MalformedEntry is the one recoverable case:
readers catch it per line or record, log a warning and keep going.
"""


class ShadeDiffError(Exception):
    """Base class for all shadediff failures."""


class ReferenceUnresolvable(ShadeDiffError):
    """A bundle reference could not be turned into an archive."""

    def __init__(self, reference, reason: str = ""):
        self.reference = reference
        self.reason = reason
        message = f"Could not resolve shaded jar to exclude: {reference}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class ManifestError(ShadeDiffError):
    """Base class for failures reading a bundle's manifest."""

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(message)


class ManifestMissing(ManifestError):
    """The archive carries no recognizable record of what it bundled."""

    def __init__(self, source: str, looked_for: str = ""):
        message = f"No contents manifest found in {source}"
        if looked_for:
            message = f"{message} (looked for {looked_for})"
        super().__init__(source, message)


class ManifestUnreadable(ManifestError):
    """The archive or one of its manifest entries could not be read."""

    def __init__(self, source: str, reason: str, entry: str = ""):
        self.entry = entry
        where = f"{source}!{entry}" if entry else source
        super().__init__(source, f"Failed to read manifest from {where}: {reason}")


class MalformedEntry(ShadeDiffError):
    """A single manifest line or record could not be parsed."""

    def __init__(self, raw: str, reason: str):
        self.raw = raw
        self.reason = reason
        super().__init__(f"{reason}: {raw!r}")


class DependencyListError(ShadeDiffError):
    """The project's resolved dependency list could not be loaded."""
