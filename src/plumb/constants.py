"""Names shared across the package."""

AUTO: str = "auto"
"""Annotation value requesting resolution by type. Never valid as a registration name."""

ANONYMOUS_PREFIX: str = "unnamed"
"""Prefix of the names generated by ``Container.register_anonymous``."""

LOGGER_NAME: str = "plumb"
"""Parent logger of every module logger in the package."""
