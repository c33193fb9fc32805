"""
Describes Python classes for the TypeScript definition generator.

Dataclasses, plain classes with annotations and enum.Enum subclasses are
described from their type hints. A class is identified by
'module.QualName'; classes met while translating type hints are remembered so
the registry can describe them when the generator reaches them.
"""

# pylint: disable=line-too-long, too-many-return-statements, too-many-branches

import collections.abc
import dataclasses
import enum
import importlib
import inspect
import logging
import types
import typing
from typing import Any, Dict, List, Optional

from tsdefgen.descriptors import (ClassDescriptor, ClassKind, DescriptorRegistry, GenericParameter, PropertyDescriptor,
                                  TypeKind, TypeReference, Visibility, array_of, class_ref, function_of, generic_ref,
                                  map_of, primitive, set_of, unknown_ref)
from tsdefgen.tsgenerator import TypeScriptGenerator

logger = logging.getLogger(__name__)

PRIMITIVE_HINTS = {
    bool: TypeKind.BOOLEAN,
    str: TypeKind.STRING,
    bytes: TypeKind.STRING,
    int: TypeKind.INTEGER,
    float: TypeKind.FLOAT,
    object: TypeKind.ANY,
}

ARRAY_ORIGINS = (list, tuple, collections.abc.Sequence, collections.abc.MutableSequence,
                 collections.abc.Iterable, collections.abc.Collection)
SET_ORIGINS = (set, frozenset, collections.abc.Set, collections.abc.MutableSet)
MAP_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)

UNION_ORIGINS = (typing.Union, types.UnionType)

NONE_TYPE = type(None)


def is_describable_class(cls: Any) -> bool:
    """True for classes the introspector emits by default: dataclasses and enums."""
    return inspect.isclass(cls) and (dataclasses.is_dataclass(cls) or issubclass(cls, enum.Enum))


class PythonIntrospector:
    """ Produces class descriptors from Python classes """

    def __init__(self) -> None:
        self.known_classes: Dict[str, type] = {}

    def class_name(self, cls: type) -> str:
        return f"{cls.__module__}.{cls.__qualname__}"

    def add_class(self, cls: type) -> str:
        """Remembers a class and returns its qualified name."""
        name = self.class_name(cls)
        self.known_classes[name] = cls
        return name

    def registry(self) -> DescriptorRegistry:
        return DescriptorRegistry(resolver=self.resolve)

    def resolve(self, class_name: str) -> Optional[ClassDescriptor]:
        """Describes a class by qualified name, importing it if it has not been met yet."""
        cls = self.known_classes.get(class_name) or self.import_class(class_name)
        if cls is None:
            return None
        return self.describe(cls)

    def import_class(self, class_name: str) -> Optional[type]:
        parts = class_name.split('.')
        for split in range(len(parts) - 1, 0, -1):
            module_name = '.'.join(parts[:split])
            try:
                obj: Any = importlib.import_module(module_name)
            except ImportError:
                continue
            for attribute in parts[split:]:
                obj = getattr(obj, attribute, None)
                if obj is None:
                    return None
            if inspect.isclass(obj):
                self.known_classes[class_name] = obj
                return obj
            return None
        return None

    def translate_type(self, hint: Any) -> TypeReference:
        """Translates a type hint into a type reference."""
        if hint is Any:
            return primitive(TypeKind.ANY)
        if hint in PRIMITIVE_HINTS:
            return primitive(PRIMITIVE_HINTS[hint])
        if isinstance(hint, typing.TypeVar):
            return generic_ref(hint.__name__)
        if hasattr(hint, '__supertype__'):
            return self.translate_type(hint.__supertype__)

        origin = typing.get_origin(hint)
        args = typing.get_args(hint)

        if origin in UNION_ORIGINS:
            members = [a for a in args if a is not NONE_TYPE]
            nullable = len(members) < len(args)
            if len(members) == 1:
                return self.translate_type(members[0]).with_nullability(nullable)
            logger.debug("Union %r has no structural counterpart", hint)
            return unknown_ref(repr(hint), nullable=nullable)
        if origin is typing.Literal:
            if all(isinstance(a, str) for a in args):
                return primitive(TypeKind.STRING)
            return unknown_ref(repr(hint))
        if origin is typing.ClassVar or origin is typing.Final:
            return self.translate_type(args[0]) if args else primitive(TypeKind.ANY)

        if origin in SET_ORIGINS or hint in SET_ORIGINS:
            return set_of(self.translate_type(args[0]) if args else None)
        if origin in MAP_ORIGINS or hint in MAP_ORIGINS:
            if len(args) == 2:
                return map_of(self.translate_type(args[0]), self.translate_type(args[1]))
            return map_of(None, None)
        if origin is tuple or hint is tuple:
            if len(args) == 2 and args[1] is Ellipsis:
                return array_of(self.translate_type(args[0]))
            if args and all(a == args[0] for a in args):
                return array_of(self.translate_type(args[0]))
            return array_of(primitive(TypeKind.ANY) if args else None)
        if origin in ARRAY_ORIGINS or hint in ARRAY_ORIGINS:
            return array_of(self.translate_type(args[0]) if args else None)
        if origin is collections.abc.Callable:
            return self.translate_callable(args)

        if origin is not None and inspect.isclass(origin):
            return class_ref(self.add_class(origin), *[self.translate_type(a) for a in args])
        if inspect.isclass(hint):
            return class_ref(self.add_class(hint))
        logger.debug("Type hint %r has no structural counterpart", hint)
        return unknown_ref(repr(hint))

    def translate_callable(self, args) -> TypeReference:
        if len(args) != 2:
            return function_of([], None)
        parameters, result = args
        parameter_types = [] if parameters is Ellipsis else [self.translate_type(p) for p in parameters]
        return function_of(parameter_types, None if result is NONE_TYPE else self.translate_type(result))

    def describe(self, cls: type) -> ClassDescriptor:
        """Describes one class. Raises if its type hints cannot be resolved."""
        name = self.add_class(cls)
        ts_name = cls.__dict__.get('__ts_name__')
        if issubclass(cls, enum.Enum):
            values = tuple(member.value if isinstance(member.value, str) else member.name for member in cls)
            return ClassDescriptor(name, ClassKind.ENUM, enum_values=values, ts_name=ts_name)

        return ClassDescriptor(
            name=name,
            kind=ClassKind.STRUCT,
            properties=tuple(self.describe_properties(cls)),
            supertypes=tuple(self.translate_type(base) for base in cls.__dict__.get('__orig_bases__', cls.__bases__)),
            type_parameters=tuple(self.describe_type_parameters(cls)),
            ts_name=ts_name,
        )

    def describe_type_parameters(self, cls: type) -> List[GenericParameter]:
        parameters = []
        for type_var in cls.__dict__.get('__parameters__', ()):
            if not isinstance(type_var, typing.TypeVar):
                continue
            bound = type_var.__bound__
            bounds = (self.translate_type(bound),) if bound is not None else ()
            parameters.append(GenericParameter(type_var.__name__, bounds))
        return parameters

    def describe_properties(self, cls: type) -> List[PropertyDescriptor]:
        """Own annotated attributes in declaration order, then properties and public methods."""
        hints = typing.get_type_hints(cls)
        own_annotations = inspect.get_annotations(cls)
        fields = {f.name: f for f in dataclasses.fields(cls)} if dataclasses.is_dataclass(cls) else {}

        properties = []
        for attribute_name in own_annotations:
            hint = hints.get(attribute_name, Any)
            if typing.get_origin(hint) is typing.ClassVar or isinstance(hint, dataclasses.InitVar):
                continue
            dataclass_field = fields.get(attribute_name)
            deprecated = dataclass_field.metadata.get('deprecated') if dataclass_field is not None else None
            if deprecated is True:
                deprecated = ''
            properties.append(PropertyDescriptor(
                name=attribute_name,
                type=self.translate_type(hint),
                visibility=Visibility.NON_PUBLIC if attribute_name.startswith('_') else Visibility.PUBLIC,
                deprecated=deprecated if isinstance(deprecated, str) else None,
            ))

        for attribute_name, value in cls.__dict__.items():
            if attribute_name.startswith('_') or attribute_name in own_annotations:
                continue
            if isinstance(value, property) and value.fget is not None:
                return_hint = typing.get_type_hints(value.fget).get('return', Any)
                properties.append(PropertyDescriptor(attribute_name, self.translate_type(return_hint)))
            elif inspect.isfunction(value):
                properties.append(PropertyDescriptor(attribute_name, self.describe_method(value), is_callable=True))
        return properties

    def describe_method(self, function) -> TypeReference:
        hints = typing.get_type_hints(function)
        parameters = list(inspect.signature(function).parameters.values())[1:]
        parameter_types = [self.translate_type(hints.get(p.name, Any)) for p in parameters]
        result = hints.get('return', Any)
        return function_of(parameter_types, None if result is NONE_TYPE else self.translate_type(result),
                           parameter_names=[p.name for p in parameters])


def convert_python_to_typescript(module_name: str, ts_file_path: str, class_names: Optional[List[str]] = None,
                                 modules: bool = False, **options) -> TypeScriptGenerator:
    """
    Convert Python classes to TypeScript definitions.

    Args:
        module_name: Module to take the classes from.
        ts_file_path: Output .d.ts file, or output directory when modules is set.
        class_names: Root class names, qualified or relative to the module.
            Defaults to every dataclass and enum defined in the module.
        modules: Emit one module per class instead of a single file.
        **options: Keyword arguments for TypeScriptGenerator.
    """
    module = importlib.import_module(module_name)
    introspector = PythonIntrospector()
    if class_names:
        root_classes = [name if '.' in name and not hasattr(module, name.split('.')[0]) else f"{module_name}.{name}"
                        for name in class_names]
    else:
        root_classes = [introspector.add_class(cls) for _, cls in inspect.getmembers(module, is_describable_class)
                        if cls.__module__ == module_name]
    generator = TypeScriptGenerator(introspector.registry(), root_classes, **options)
    if modules:
        generator.write_modules(ts_file_path)
    else:
        generator.write_definitions(ts_file_path)
    return generator
