"""Parsing of the artifact list given to the import command."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

log = logging.getLogger(__name__)

TRUE_VALUES = frozenset(["1", "t", "T", "TRUE", "true", "True"])
FALSE_VALUES = frozenset(["0", "f", "F", "FALSE", "false", "False"])


@dataclass(frozen=True, kw_only=True)
class ArtifactReference:
    """A local artifact file to upload.

    Primary artifacts define a new API version, secondary ones enrich it.
    """

    path: str
    is_primary: bool = True


def parse_bool(value: str) -> bool:
    """Parse a boolean flag value.

    Raises:
        ValueError: If value is not a recognized boolean spelling

    """
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ValueError(f"invalid boolean: {value!r}")


def parse_artifact_list(raw: str) -> Sequence[ArtifactReference]:
    """Split ``file1[:bool],file2[:bool]`` into artifact references, keeping order."""
    artifacts: list[ArtifactReference] = []

    for token in raw.split(","):
        if ":" not in token:
            artifacts.append(ArtifactReference(path=token))
            continue

        path, flag = token.split(":", 1)
        try:
            is_primary = parse_bool(flag)
        except ValueError:
            log.warning("Cannot parse '%s' as Bool, default to true", flag)
            is_primary = True
        artifacts.append(ArtifactReference(path=path, is_primary=is_primary))

    return artifacts
