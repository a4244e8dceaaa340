"""
Resource declaration graph.

Declarations describe CloudFormation resources that do not exist yet. Values
that are only known after deployment (IDs, ARNs, DNS names) are expressed as
Ref handles pointing at another declaration; resolving them is the job of the
provisioning engine. The graph checks every reference when a declaration is
added, so a missing or circular dependency fails the run immediately.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from .errors import (
    CyclicReferenceError,
    DanglingReferenceError,
    DuplicateNameError,
    GraphStateError,
    InvalidNameError,
)

logger = logging.getLogger(__name__)

_LOGICAL_NAME = re.compile(r"^[A-Za-z][A-Za-z0-9]*$")


@dataclass(frozen=True)
class Ref:
    """
    Forward reference to an attribute of another declaration.

    ``attribute=None`` stands for the resource's primary identifier (what
    CloudFormation returns for ``Ref``); any other value is read with
    ``Fn::GetAtt``.
    """

    target: str
    attribute: Optional[str] = None


@dataclass(frozen=True)
class Join:
    """String built from literals and references, joined by ``delimiter``."""

    parts: Tuple[Union[str, Ref], ...]
    delimiter: str = ""


@dataclass(frozen=True)
class ResourceDeclaration:
    """
    A named, typed description of a cloud resource.

    Attributes:
        name: Logical name, unique within the graph
        type: CloudFormation resource type, e.g. ``AWS::EC2::VPC``
        properties: CloudFormation properties; values may contain Ref and Join
        depends_on: Names of declarations that must be created first even
            though none of their attributes are consumed
    """

    name: str
    type: str
    properties: Mapping[str, Any] = field(default_factory=dict)
    depends_on: Tuple[str, ...] = ()

    def ref(self, attribute: Optional[str] = None) -> Ref:
        return Ref(self.name, attribute)

    def references(self) -> List[Ref]:
        """Every Ref found in the property tree, in traversal order."""
        return list(_walk_refs(self.properties))

    def dependencies(self) -> Tuple[str, ...]:
        """Names this declaration depends on, without duplicates."""
        names: Dict[str, None] = {}
        for reference in self.references():
            names[reference.target] = None
        for name in self.depends_on:
            names[name] = None
        return tuple(names)


@dataclass(frozen=True)
class ConditionalSubgraph:
    """A group of declarations that only exists when a feature flag is on."""

    name: str
    declarations: Tuple[ResourceDeclaration, ...]

    def get(self, name: str) -> Optional[ResourceDeclaration]:
        for declaration in self.declarations:
            if declaration.name == name:
                return declaration
        return None


@dataclass(frozen=True)
class OutputBinding:
    """Named value exposed to external tooling once the graph is complete."""

    name: str
    value: Union[Ref, Join]
    description: str = ""


def _walk_refs(value: Any) -> Iterator[Ref]:
    if isinstance(value, Ref):
        yield value
    elif isinstance(value, Join):
        for part in value.parts:
            yield from _walk_refs(part)
    elif isinstance(value, Mapping):
        for item in value.values():
            yield from _walk_refs(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from _walk_refs(item)


def _to_plain(value: Any) -> Any:
    if isinstance(value, Ref):
        if value.attribute is None:
            return {"Ref": value.target}
        return {"Fn::GetAtt": [value.target, value.attribute]}
    if isinstance(value, Join):
        return {"Fn::Join": [value.delimiter, [_to_plain(part) for part in value.parts]]}
    if isinstance(value, Mapping):
        return {key: _to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_plain(item) for item in value]
    return value


class ResourceGraph:
    """
    Append-only DAG of resource declarations.

    Declarations are added in dependency order: every reference must point at
    a declaration that is already present. Once ``seal`` is called the graph is
    frozen and outputs can be bound against it.
    """

    def __init__(self) -> None:
        self._declarations: Dict[str, ResourceDeclaration] = {}
        self._outputs: Dict[str, OutputBinding] = {}
        self._sealed = False

    def __len__(self) -> int:
        return len(self._declarations)

    def __iter__(self) -> Iterator[ResourceDeclaration]:
        return iter(self._declarations.values())

    def __contains__(self, name: object) -> bool:
        return name in self._declarations

    @property
    def sealed(self) -> bool:
        return self._sealed

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(self._declarations)

    @property
    def outputs(self) -> Tuple[OutputBinding, ...]:
        return tuple(self._outputs.values())

    def get(self, name: str) -> ResourceDeclaration:
        try:
            return self._declarations[name]
        except KeyError:
            raise KeyError(f"No resource named '{name}' in the graph") from None

    def of_type(self, resource_type: str) -> List[ResourceDeclaration]:
        return [d for d in self._declarations.values() if d.type == resource_type]

    def dependencies(self, name: str) -> Tuple[str, ...]:
        return self.get(name).dependencies()

    def add(self, declaration: ResourceDeclaration) -> ResourceDeclaration:
        """
        Add a declaration to the graph.

        Raises:
            GraphStateError: If the graph has been sealed
            InvalidNameError: If the name is not a valid logical ID
            DuplicateNameError: If the name is already taken
            CyclicReferenceError: If the declaration references itself
            DanglingReferenceError: If a reference targets an unknown name
        """
        if self._sealed:
            raise GraphStateError(
                f"Cannot add '{declaration.name}': the graph has been sealed"
            )
        if not _LOGICAL_NAME.match(declaration.name):
            raise InvalidNameError(
                f"'{declaration.name}' is not a valid logical name "
                "(letters and digits only, starting with a letter)"
            )
        if declaration.name in self._declarations:
            raise DuplicateNameError(declaration.name)

        for target in declaration.dependencies():
            if target == declaration.name:
                raise CyclicReferenceError([declaration.name, declaration.name])
            if target not in self._declarations:
                raise DanglingReferenceError(declaration.name, target)

        self._declarations[declaration.name] = declaration
        logger.debug("Declared %s (%s)", declaration.name, declaration.type)
        return declaration

    def extend(self, declarations: Iterable[ResourceDeclaration]) -> None:
        for declaration in declarations:
            self.add(declaration)

    def topological_order(self) -> List[str]:
        """
        Return declaration names ordered so that dependencies come first.

        Raises:
            CyclicReferenceError: If the edges contain a cycle
            DanglingReferenceError: If an edge targets an unknown declaration
        """
        order: List[str] = []
        state: Dict[str, str] = {}

        def visit(name: str, path: List[str]) -> None:
            if state.get(name) == "done":
                return
            if state.get(name) == "visiting":
                raise CyclicReferenceError(path[path.index(name):] + [name])
            state[name] = "visiting"
            for target in self._declarations[name].dependencies():
                if target not in self._declarations:
                    raise DanglingReferenceError(name, target)
                visit(target, path + [name])
            state[name] = "done"
            order.append(name)

        for name in self._declarations:
            visit(name, [])
        return order

    def seal(self) -> "ResourceGraph":
        """Validate the whole graph and freeze it against further additions."""
        if not self._sealed:
            self.topological_order()
            self._sealed = True
            logger.info("Resource graph sealed with %d declarations", len(self))
        return self

    def bind_output(self, name: str, value: Union[Ref, Join], description: str = "") -> OutputBinding:
        """
        Bind a named output to an attribute of the sealed graph.

        Raises:
            GraphStateError: If the graph has not been sealed yet
            DuplicateNameError: If an output with this name already exists
            DanglingReferenceError: If the value references an unknown declaration
        """
        if not self._sealed:
            raise GraphStateError(f"Cannot bind output '{name}' before the graph is sealed")
        if name in self._outputs:
            raise DuplicateNameError(name, namespace="output")
        for reference in _walk_refs(value):
            if reference.target not in self._declarations:
                raise DanglingReferenceError(f"output:{name}", reference.target)

        binding = OutputBinding(name=name, value=value, description=description)
        self._outputs[name] = binding
        return binding

    def to_dict(self) -> Dict[str, Any]:
        """Plain, JSON-serialisable view of the graph in CloudFormation syntax."""
        resources: Dict[str, Any] = {}
        for declaration in self:
            entry: Dict[str, Any] = {
                "Type": declaration.type,
                "Properties": _to_plain(declaration.properties),
            }
            if declaration.depends_on:
                entry["DependsOn"] = list(declaration.depends_on)
            resources[declaration.name] = entry
        return {
            "Resources": resources,
            "Outputs": {
                output.name: {"Value": _to_plain(output.value), "Description": output.description}
                for output in self.outputs
            },
        }
