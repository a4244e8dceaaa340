"""
Exception hierarchy for the synthesis run.

Every error raised here is a construction-time failure: nothing has been
handed to CloudFormation yet, and nothing is retried.
"""

from typing import Iterable, Sequence


class SynthesisError(Exception):
    """Base class for every failure raised while building the resource graph."""


class ConfigurationError(SynthesisError):
    """Raised when environment input cannot be resolved into a Configuration."""

    def __init__(self, message: str, parameters: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.parameters = tuple(parameters)


class GraphReferenceError(SynthesisError):
    """Structural error in the reference edges of the graph."""


class DanglingReferenceError(GraphReferenceError):
    """A declaration points at a declaration that is not in the graph."""

    def __init__(self, source: str, target: str) -> None:
        super().__init__(
            f"Resource '{source}' references '{target}', which has not been declared"
        )
        self.source = source
        self.target = target


class CyclicReferenceError(GraphReferenceError):
    """The reference edges form a cycle."""

    def __init__(self, cycle: Sequence[str]) -> None:
        super().__init__(f"Reference cycle detected: {' -> '.join(cycle)}")
        self.cycle = tuple(cycle)


class DuplicateNameError(SynthesisError):
    """Two declarations (or two outputs) share a logical name."""

    def __init__(self, name: str, namespace: str = "resource") -> None:
        super().__init__(f"Duplicate {namespace} name '{name}'")
        self.name = name
        self.namespace = namespace


class InvalidNameError(SynthesisError):
    """A logical name cannot be used as a CloudFormation logical ID."""


class GraphStateError(SynthesisError):
    """The graph was used out of order (mutated after sealing, or read before)."""
