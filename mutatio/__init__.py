"""Git-flow branch and release lifecycle for Maven projects."""

__version__ = "0.1.0"
