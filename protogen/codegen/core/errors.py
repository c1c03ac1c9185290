"""
Exceptions raised while compiling an API specification.

Every failure is an authoring defect in the schema, so all of them share
``GeneratorError`` as a base and abort the run without partial output.
"""


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class SchemaError(GeneratorError):
    """The input document does not decode into the specification shape."""

    pass


class InvalidNameError(SchemaError):
    """An identifier in the document is not a valid kebab-case name."""

    pass


class UnresolvedReferenceError(GeneratorError):
    """A name refers to a definition absent from the schema."""

    def __init__(self, kind: str, name):
        self.kind = kind
        self.name = name
        super().__init__(f"No {kind} '{name}' found")


class StaticRuleError(GeneratorError):
    """The schema is well formed but cannot be compiled as written."""

    pass
