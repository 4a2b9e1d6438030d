"""CI pipeline variable export."""

from .export import (
    AzureExporter,
    BuildSystem,
    DotEnvExporter,
    GitHubExporter,
    JenkinsExporter,
    TeamCityExporter,
    VariableExporter,
    detect_build_system,
    export_file,
    exporter_for,
)

__all__ = [
    "AzureExporter",
    "BuildSystem",
    "DotEnvExporter",
    "GitHubExporter",
    "JenkinsExporter",
    "TeamCityExporter",
    "VariableExporter",
    "detect_build_system",
    "export_file",
    "exporter_for",
]
