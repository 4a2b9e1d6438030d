"""Project manifests (Maven pom.xml) and artifact coordinates."""

from .coordinates import ArtifactCoordinate, parse_artifact_list
from .pom import POM_FILENAME, PomManifest

__all__ = ["POM_FILENAME", "ArtifactCoordinate", "PomManifest", "parse_artifact_list"]
