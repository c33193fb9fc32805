"""
Structural type descriptors consumed by the TypeScript definition generator.

Descriptors are immutable. They are produced once by a collaborator (the JSON
descriptor loader, the Python introspector, or calling code) and looked up by
qualified name through a DescriptorRegistry.
"""

# pylint: disable=line-too-long

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple


class TsDefGenError(Exception):
    """
    Base exception for tsdefgen.

    Attributes:
        message: Human-readable error description
        context: Optional context about where the error occurred
        cause: Optional underlying exception that caused this error
    """

    def __init__(self, message: str, context: Optional[str] = None,
                 cause: Optional[Exception] = None) -> None:
        self.message = message
        self.context = context
        self.cause = cause
        full_message = message
        if context:
            full_message = f"{message} (context: {context})"
        super().__init__(full_message)


class DescriptorNotFoundError(TsDefGenError):
    """
    Raised when no descriptor can be produced for a class.

    Attributes:
        class_name: Qualified name of the class that could not be described
    """

    def __init__(self, class_name: str, context: Optional[str] = None,
                 cause: Optional[Exception] = None) -> None:
        self.class_name = class_name
        super().__init__(f"No descriptor for class '{class_name}'", context, cause)


class DescriptorFormatError(TsDefGenError):
    """Raised when a descriptor document is malformed."""


class ClassKind(Enum):
    STRUCT = 'struct'
    ENUM = 'enum'


class Visibility(Enum):
    PUBLIC = 'public'
    NON_PUBLIC = 'non-public'


class TypeKind(Enum):
    BOOLEAN = 'boolean'
    STRING = 'string'
    INTEGER = 'integer'
    FLOAT = 'float'
    ANY = 'any'
    CLASS = 'class'
    GENERIC = 'generic'
    ARRAY = 'array'
    SET = 'set'
    MAP = 'map'
    FUNCTION = 'function'
    UNKNOWN = 'unknown'


PRIMITIVE_KINDS = frozenset([TypeKind.BOOLEAN, TypeKind.STRING, TypeKind.INTEGER, TypeKind.FLOAT, TypeKind.ANY])
CONTAINER_KINDS = frozenset([TypeKind.ARRAY, TypeKind.SET, TypeKind.MAP])


@dataclass(frozen=True)
class TypeReference:
    """
    A possibly-nullable, possibly-generic reference to a type.

    `arguments` holds the type arguments of a class reference, the element type
    of an array or set, the key and value types of a map, or the parameter
    types of a function. A container missing one of its arguments is
    malformed and is rendered with the top type in its place.
    """
    kind: TypeKind
    name: str = ''
    arguments: Tuple['TypeReference', ...] = ()
    nullable: bool = False
    result: Optional['TypeReference'] = None
    parameter_names: Tuple[str, ...] = ()

    def argument(self, index: int) -> Optional['TypeReference']:
        """Returns the argument at index, or None if the reference does not carry it."""
        if index < len(self.arguments):
            return self.arguments[index]
        return None

    def with_nullability(self, nullable: bool) -> 'TypeReference':
        return replace(self, nullable=nullable)

    def is_top_type(self) -> bool:
        """True for the implicit top type, which never needs to be spelled out as a bound or supertype."""
        return self.kind == TypeKind.ANY


@dataclass(frozen=True)
class GenericParameter:
    name: str
    bounds: Tuple[TypeReference, ...] = ()


@dataclass(frozen=True)
class PropertyDescriptor:
    name: str
    type: TypeReference
    visibility: Visibility = Visibility.PUBLIC
    is_callable: bool = False
    overridden_from: Optional[str] = None
    deprecated: Optional[str] = None


@dataclass(frozen=True)
class ClassDescriptor:
    """Structural description of one emittable type: a struct or an enum."""
    name: str
    kind: ClassKind = ClassKind.STRUCT
    properties: Tuple[PropertyDescriptor, ...] = ()
    supertypes: Tuple[TypeReference, ...] = ()
    type_parameters: Tuple[GenericParameter, ...] = ()
    enum_values: Tuple[str, ...] = ()
    ts_name: Optional[str] = None

    @property
    def is_enum(self) -> bool:
        return self.kind == ClassKind.ENUM


def primitive(kind: TypeKind, nullable: bool = False) -> TypeReference:
    """Creates a reference to a primitive type."""
    if kind not in PRIMITIVE_KINDS:
        raise ValueError(f"{kind} is not a primitive kind")
    return TypeReference(kind, nullable=nullable)


def class_ref(name: str, *arguments: TypeReference, nullable: bool = False) -> TypeReference:
    """Creates a reference to a class, optionally with type arguments."""
    return TypeReference(TypeKind.CLASS, name, tuple(arguments), nullable)


def generic_ref(name: str, nullable: bool = False) -> TypeReference:
    """Creates a reference to a generic parameter of the enclosing class."""
    return TypeReference(TypeKind.GENERIC, name, nullable=nullable)


def array_of(item: Optional[TypeReference], nullable: bool = False) -> TypeReference:
    return TypeReference(TypeKind.ARRAY, arguments=(item,) if item is not None else (), nullable=nullable)


def set_of(item: Optional[TypeReference], nullable: bool = False) -> TypeReference:
    return TypeReference(TypeKind.SET, arguments=(item,) if item is not None else (), nullable=nullable)


def map_of(key: Optional[TypeReference], value: Optional[TypeReference], nullable: bool = False) -> TypeReference:
    arguments = tuple(a for a in (key, value) if a is not None) if key is not None else ()
    return TypeReference(TypeKind.MAP, arguments=arguments, nullable=nullable)


def function_of(parameters: Iterable[TypeReference], result: Optional[TypeReference],
                parameter_names: Iterable[str] = (), nullable: bool = False) -> TypeReference:
    """Creates a function type reference. Unnamed parameters render as param0, param1, ..."""
    return TypeReference(TypeKind.FUNCTION, arguments=tuple(parameters), nullable=nullable,
                         result=result, parameter_names=tuple(parameter_names))


def unknown_ref(name: str = '', nullable: bool = False) -> TypeReference:
    return TypeReference(TypeKind.UNKNOWN, name, nullable=nullable)


class DescriptorRegistry:
    """
    Looks up class descriptors by qualified name.

    Descriptors are either registered up front or produced on demand by an
    optional resolver callback. A class that can be described by neither is a
    hard failure: DescriptorNotFoundError propagates to the caller.
    """

    def __init__(self, descriptors: Iterable[ClassDescriptor] = (),
                 resolver: Optional[Callable[[str], Optional[ClassDescriptor]]] = None) -> None:
        self._descriptors: Dict[str, ClassDescriptor] = {}
        self._resolver = resolver
        for descriptor in descriptors:
            self.register(descriptor)

    def register(self, descriptor: ClassDescriptor) -> None:
        self._descriptors[descriptor.name] = descriptor

    def __contains__(self, class_name: str) -> bool:
        try:
            self.describe_class(class_name)
        except DescriptorNotFoundError:
            return False
        return True

    def __iter__(self):
        return iter(list(self._descriptors.values()))

    def describe_class(self, class_name: str) -> ClassDescriptor:
        """Returns the descriptor for class_name or raises DescriptorNotFoundError."""
        descriptor = self._descriptors.get(class_name)
        if descriptor is not None:
            return descriptor
        if self._resolver is not None:
            try:
                descriptor = self._resolver(class_name)
            except DescriptorNotFoundError:
                raise
            except Exception as e:
                raise DescriptorNotFoundError(class_name, 'resolver failed', e) from e
            if descriptor is not None:
                self._descriptors[class_name] = descriptor
                return descriptor
        raise DescriptorNotFoundError(class_name)

    def ancestors(self, class_name: str) -> List[str]:
        """
        Returns the qualified names of all transitive supertypes of a class,
        nearest first. Supertypes that cannot be described are still listed but
        not walked further.
        """
        result: List[str] = []
        pending = [class_name]
        while pending:
            current = pending.pop(0)
            try:
                descriptor = self.describe_class(current)
            except DescriptorNotFoundError:
                continue
            for supertype in descriptor.supertypes:
                if supertype.kind == TypeKind.CLASS and supertype.name not in result and supertype.name != class_name:
                    result.append(supertype.name)
                    pending.append(supertype.name)
        return result

    def is_subclass_of(self, class_name: str, anchor: str) -> bool:
        """True if class_name is anchor or transitively extends it."""
        return class_name == anchor or anchor in self.ancestors(class_name)
