"""Configuration, project discovery, rules and reports for checking Convex projects."""

__version__ = "1.1.0"