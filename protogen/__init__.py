"""protogen: compile YAML API specifications into Python protocol modules."""

__version__ = "0.1.0"
