"""
Exceptions raised while building a schema or generating code from it.
"""


class SchemaError(ValueError):
    """Raised by the schema builder for input it cannot turn into a schema tree."""
    pass


class GenerationError(RuntimeError):
    """Raised when code generation has to abort. No partial output is written."""
    pass


class SchemaCycleError(GenerationError):
    pass


class GenerationCancelled(GenerationError):
    pass


class ScopeError(GenerationError):
    """Unbalanced bracket/end_bracket use on a CodeWriter."""
    pass
