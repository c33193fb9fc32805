# pylint: disable=line-too-long, too-many-arguments, too-many-locals, too-many-instance-attributes

""" TypeScriptGenerator: emits TypeScript definitions covering a graph of class descriptors """

import logging
import os
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Set, Tuple, Union

from tsdefgen.common import is_ts_identifier, parse_mapping_args, process_template, quote_ts_string, simple_name, write_file
from tsdefgen.descriptorloader import load_descriptor_file
from tsdefgen.descriptors import (ClassDescriptor, DescriptorRegistry, PropertyDescriptor, TypeKind,
                                  TypeReference, Visibility, primitive)
from tsdefgen.transformers import ClassTransformer, ClassTransformerPipeline
from tsdefgen.traversal import TraversalState
from tsdefgen.tsmodules import ModuleResolver
from tsdefgen.tstype import TypeScriptType, VoidType

logger = logging.getLogger(__name__)

DEFAULT_IGNORED_SUPERCLASSES = frozenset([
    'builtins.object',
    'typing.Generic',
    'typing.Protocol',
    'abc.ABC',
    'enum.Enum',
])

# substituted for the missing element, key or value of a malformed container
TOP_TYPE = primitive(TypeKind.ANY, nullable=True)

UNKNOWN_TYPE = 'UNKNOWN'

# ordered set of discovered class names
Discovered = Dict[str, None]


class TypeScriptGenerator:
    """
    Generates the content of a TypeScript definition file (.d.ts) covering a
    set of root classes and, recursively, every class reachable from them
    through supertypes, property types and generic bounds.

    Args:
        registry: Source of class descriptors.
        root_classes: Qualified names of the classes to start the traversal from.
        mappings: Qualified class name -> TypeScript text used verbatim instead of
            the class, e.g. {'datetime.datetime': 'string'}. Mapped classes are never emitted.
        name_mappings: Qualified class name -> TypeScript name for the emitted declaration.
        class_transformers: Ordered customization stages, see tsdefgen.transformers.
        ignore_superclasses: Classes that are not emitted or traversed when they
            appear as supertypes. Added to DEFAULT_IGNORED_SUPERCLASSES.
        int_type_name: Name integer numbers are emitted as.
        void_type: Literal for "no value", VoidType.NULL or VoidType.UNDEFINED.
        use_native_sets: Emit sets as Set<T> instead of T[].
        enums_as_named_constructs: Emit enums as `enum X { ... }` instead of a union of string literals.
        interface_prefix: Prefix added to interface names, e.g. 'I'.
        extra_super_types: Callback returning additional supertypes for a class.
        include_overridden_properties: Keep properties that redeclare an ancestor's
            property with the same name and type.
        include_callables: Emit methods and function-valued properties.
    """

    def __init__(self,
                 registry: DescriptorRegistry,
                 root_classes: Iterable[str] = (),
                 mappings: Optional[Union[Dict[str, str], Iterable[str]]] = None,
                 name_mappings: Optional[Union[Dict[str, str], Iterable[str]]] = None,
                 class_transformers: Optional[Sequence[ClassTransformer]] = None,
                 ignore_superclasses: Optional[Iterable[str]] = None,
                 int_type_name: Optional[str] = 'number',
                 void_type: Union[VoidType, str, None] = VoidType.NULL,
                 use_native_sets: bool = False,
                 enums_as_named_constructs: bool = False,
                 interface_prefix: Optional[str] = '',
                 extra_super_types: Optional[Callable[[ClassDescriptor], Iterable[TypeReference]]] = None,
                 include_overridden_properties: bool = False,
                 include_callables: bool = False) -> None:
        self.registry = registry
        self.mappings = parse_mapping_args(mappings)
        self.name_mappings = parse_mapping_args(name_mappings)
        self.ignored_superclasses = DEFAULT_IGNORED_SUPERCLASSES.union(ignore_superclasses or [])
        self.int_type_name = int_type_name or 'number'
        self.void_type = VoidType(void_type) if void_type else VoidType.NULL
        self.use_native_sets = use_native_sets
        self.enums_as_named_constructs = enums_as_named_constructs
        self.interface_prefix = interface_prefix or ''
        self.extra_super_types = extra_super_types or (lambda _: ())
        self.include_overridden_properties = include_overridden_properties
        self.include_callables = include_callables
        self.pipeline = ClassTransformerPipeline(class_transformers or [], registry.is_subclass_of)
        self.state = TraversalState()
        # qualified class name -> name used in references, set while emitting a module unit
        self.reference_aliases: Dict[str, str] = {}
        for root_class in root_classes:
            self.visit_class(root_class)

    def visit_class(self, class_name: str) -> None:
        """Emits a definition for class_name and everything it depends on. Idempotent."""
        if class_name in self.mappings:
            return
        if not self.state.mark_visited(class_name):
            return
        klass = self.registry.describe_class(class_name)
        logger.debug("Generating definition for %s", class_name)
        discovered: Discovered = {}
        definition = self.generate_definition(klass, discovered)
        self.state.record(class_name, definition, list(discovered))
        for dependency in discovered:
            self.visit_class(dependency)

    def class_ts_name(self, klass: ClassDescriptor) -> str:
        """The TypeScript name of a class, including the interface prefix where it applies."""
        name = klass.ts_name or self.name_mappings.get(klass.name) or simple_name(klass.name)
        if klass.is_enum or klass.name in self.ignored_superclasses:
            return name
        return self.interface_prefix + name

    def format_type(self, type_ref: TypeReference, discovered: Discovered) -> TypeScriptType:
        """
        Formats a type reference as TypeScript. Every class the reference
        mentions, other than mapped ones, is added to discovered.
        """
        kind = type_ref.kind
        if kind == TypeKind.CLASS and type_ref.name in self.mappings:
            return TypeScriptType.single(self.mappings[type_ref.name], type_ref.nullable, self.void_type)

        if kind == TypeKind.BOOLEAN:
            ts_type = 'boolean'
        elif kind == TypeKind.STRING:
            ts_type = 'string'
        elif kind == TypeKind.INTEGER:
            ts_type = self.int_type_name
        elif kind == TypeKind.FLOAT:
            ts_type = 'number'
        elif kind == TypeKind.ANY:
            ts_type = 'any'
        elif kind == TypeKind.GENERIC and type_ref.name:
            ts_type = type_ref.name
        elif kind == TypeKind.ARRAY:
            ts_type = self.format_array(type_ref, discovered)
        elif kind == TypeKind.SET:
            if self.use_native_sets:
                item_type = self.format_type(self.container_argument(type_ref, 0), discovered)
                ts_type = f"Set<{item_type.format_without_parenthesis()}>"
            else:
                ts_type = self.format_array(type_ref, discovered)
        elif kind == TypeKind.MAP:
            ts_type = self.format_map(type_ref, discovered)
        elif kind == TypeKind.FUNCTION:
            ts_type = f"({self.format_parameters(type_ref, discovered)}) => {self.format_result(type_ref, discovered)}"
        elif kind == TypeKind.CLASS and type_ref.name:
            ts_type = self.format_class_reference(type_ref, discovered)
        else:
            logger.warning("Cannot represent type %r, emitting %s", type_ref, UNKNOWN_TYPE)
            ts_type = UNKNOWN_TYPE
        return TypeScriptType.single(ts_type, type_ref.nullable, self.void_type)

    def container_argument(self, type_ref: TypeReference, index: int) -> TypeReference:
        argument = type_ref.argument(index)
        if argument is None:
            logger.debug("Container %s is missing argument %d, using the top type", type_ref.kind.value, index)
            return TOP_TYPE
        return argument

    def format_array(self, type_ref: TypeReference, discovered: Discovered) -> str:
        # (X | null)[] and X | null[] are different types
        item_type = self.format_type(self.container_argument(type_ref, 0), discovered)
        return f"{item_type.format_with_parenthesis()}[]"

    def format_map(self, type_ref: TypeReference, discovered: Discovered) -> str:
        key_ref = self.container_argument(type_ref, 0).with_nullability(False)
        key_type = self.format_type(key_ref, discovered).format_without_parenthesis()
        value_type = self.format_type(self.container_argument(type_ref, 1), discovered).format_without_parenthesis()
        if self.is_enum_reference(key_ref):
            return f"{{ [key in {key_type}]: {value_type} }}"
        return f"{{ [key: {key_type}]: {value_type} }}"

    def is_enum_reference(self, type_ref: TypeReference) -> bool:
        if type_ref.kind != TypeKind.CLASS or type_ref.name in self.mappings:
            return False
        return self.registry.describe_class(type_ref.name).is_enum

    def format_class_reference(self, type_ref: TypeReference, discovered: Discovered) -> str:
        klass = self.registry.describe_class(type_ref.name)
        discovered[klass.name] = None
        ts_type = self.reference_aliases.get(klass.name) or self.class_ts_name(klass)
        if type_ref.arguments:
            ts_type += '<' + ', '.join(self.format_type(argument, discovered).format_without_parenthesis()
                                       for argument in type_ref.arguments) + '>'
        return ts_type

    def format_parameters(self, type_ref: TypeReference, discovered: Discovered) -> str:
        parameters = []
        for index, parameter in enumerate(type_ref.arguments):
            name = type_ref.parameter_names[index] if index < len(type_ref.parameter_names) else f"param{index}"
            parameters.append(f"{name}: {self.format_type(parameter, discovered).format_without_parenthesis()}")
        return ', '.join(parameters)

    def format_result(self, type_ref: TypeReference, discovered: Discovered) -> str:
        if type_ref.result is None:
            return 'void'
        return self.format_type(type_ref.result, discovered).format_without_parenthesis()

    def generate_definition(self, klass: ClassDescriptor, discovered: Discovered) -> str:
        """Generates the declaration of one class: an enum or an interface."""
        if klass.is_enum:
            return self.generate_enum(klass)
        return self.generate_interface(klass, discovered)

    def generate_with_aliases(self, class_name: str, aliases: Dict[str, str]) -> str:
        """Emits the declaration of an already visited class again, with references to the aliased classes renamed."""
        self.reference_aliases = aliases
        try:
            return self.generate_definition(self.registry.describe_class(class_name), {})
        finally:
            self.reference_aliases = {}

    def generate_enum(self, klass: ClassDescriptor) -> str:
        name = self.class_ts_name(klass)
        if self.enums_as_named_constructs:
            members = [{'key': self.enum_member_key(value), 'value': quote_ts_string(value, "'")}
                       for value in klass.enum_values]
            return process_template("tsdefs/enum.d.ts.jinja", name=name, members=members)
        literals = [quote_ts_string(value) for value in klass.enum_values] or ['never']
        return process_template("tsdefs/enum_union.d.ts.jinja", name=name, literals=literals)

    def enum_member_key(self, value: str) -> str:
        key = value.upper()
        if is_ts_identifier(key):
            return key
        return quote_ts_string(key, "'")

    def generate_interface(self, klass: ClassDescriptor, discovered: Discovered) -> str:
        members = []
        properties = self.pipeline.transform_property_list(self.select_properties(klass), klass)
        for prop in properties:
            property_name = self.pipeline.transform_property_name(prop.name, prop, klass)
            property_type = self.pipeline.transform_property_type(prop.type, prop, klass)
            members.append({
                'signature': self.format_member(property_name, property_type, prop, discovered),
                'deprecated': None if prop.deprecated is None else (f" {prop.deprecated}" if prop.deprecated else ''),
            })

        return process_template(
            "tsdefs/interface.d.ts.jinja",
            name=self.class_ts_name(klass),
            type_parameters=self.format_type_parameters(klass, discovered),
            extends=self.format_extends(klass, discovered),
            members=members,
        )

    def format_type_parameters(self, klass: ClassDescriptor, discovered: Discovered) -> str:
        if not klass.type_parameters:
            return ''
        parameters = []
        for type_parameter in klass.type_parameters:
            bounds = [self.format_type(bound, discovered) for bound in type_parameter.bounds if not bound.is_top_type()]
            if len(bounds) > 1:
                parameters.append(f"{type_parameter.name} extends " + ' & '.join(b.format_with_parenthesis() for b in bounds))
            elif bounds:
                parameters.append(f"{type_parameter.name} extends {bounds[0].format_without_parenthesis()}")
            else:
                parameters.append(type_parameter.name)
        return '<' + ', '.join(parameters) + '>'

    def format_extends(self, klass: ClassDescriptor, discovered: Discovered) -> str:
        supertypes = self.extended_supertypes(klass)
        if not supertypes:
            return ''
        return ' extends ' + ', '.join(self.format_type(s, discovered).format_without_parenthesis() for s in supertypes)

    def extended_supertypes(self, klass: ClassDescriptor) -> List[TypeReference]:
        """Supertypes listed in the extends clause: declared ones minus ignored and top types, then the extra ones."""
        supertypes: List[TypeReference] = []
        for supertype in klass.supertypes:
            supertype = supertype.with_nullability(False)
            if supertype.is_top_type() or (supertype.kind == TypeKind.CLASS and supertype.name in self.ignored_superclasses):
                continue
            if supertype not in supertypes:
                supertypes.append(supertype)
        for supertype in self.extra_super_types(klass):
            supertype = supertype.with_nullability(False)
            if supertype not in supertypes:
                supertypes.append(supertype)
        return supertypes

    def extended_ancestors(self, klass: ClassDescriptor) -> List[str]:
        """Transitive ancestors reachable through extends clauses, nearest first. Mapped and unregistered classes end the walk."""
        ancestors: List[str] = []
        pending = [klass]
        while pending:
            current = pending.pop(0)
            for supertype in self.extended_supertypes(current):
                name = supertype.name
                if supertype.kind != TypeKind.CLASS or name == klass.name or name in ancestors:
                    continue
                ancestors.append(name)
                if self.is_described(name):
                    pending.append(self.registry.describe_class(name))
        return ancestors

    def is_described(self, class_name: str) -> bool:
        return class_name not in self.mappings and class_name in self.registry

    def select_properties(self, klass: ClassDescriptor) -> List[PropertyDescriptor]:
        """Public properties, without callables unless enabled, without redeclared ancestor properties unless enabled."""
        ancestors = [] if self.include_overridden_properties else self.extended_ancestors(klass)
        inherited = self.inherited_properties(ancestors)
        opaque_ancestors = {name for name in ancestors if not self.is_described(name)}
        selected = []
        for prop in klass.properties:
            if prop.visibility != Visibility.PUBLIC:
                continue
            if not self.include_callables and (prop.is_callable or prop.type.kind == TypeKind.FUNCTION):
                continue
            if (prop.name, prop.type) in inherited or prop.overridden_from in opaque_ancestors:
                continue
            selected.append(prop)
        return selected

    def inherited_properties(self, ancestors: List[str]) -> Set[Tuple[str, TypeReference]]:
        """(name, type) pairs declared on the described ancestors."""
        inherited = set()
        for ancestor_name in ancestors:
            if self.is_described(ancestor_name):
                for prop in self.registry.describe_class(ancestor_name).properties:
                    inherited.add((prop.name, prop.type))
        return inherited

    def format_member(self, name: str, type_ref: TypeReference, prop: PropertyDescriptor, discovered: Discovered) -> str:
        key = name if is_ts_identifier(name) else quote_ts_string(name, "'")
        if prop.is_callable and type_ref.kind == TypeKind.FUNCTION:
            return f"{key}({self.format_parameters(type_ref, discovered)}): {self.format_result(type_ref, discovered)}"
        return f"{key}: {self.format_type(type_ref, discovered).format_without_parenthesis()}"

    @property
    def generated_definitions(self) -> Dict[str, str]:
        """Qualified class name -> declaration text, in discovery order."""
        return dict(self.state.definitions)

    @property
    def dependencies(self) -> Dict[str, List[str]]:
        """Qualified class name -> classes its declaration references directly."""
        return {name: list(deps) for name, deps in self.state.dependencies.items()}

    @property
    def definitions_text(self) -> str:
        """All declarations, sorted by qualified class name, separated by blank lines."""
        definitions = self.state.definitions
        return '\n\n'.join(definitions[name] for name in sorted(definitions))

    @property
    def individual_definitions(self) -> Set[str]:
        return set(self.state.definitions.values())

    @property
    def definitions_as_modules(self) -> Dict[str, str]:
        """Unit path -> unit text, one unit per class with imports for its dependencies."""
        return ModuleResolver(self).resolve()

    def write_definitions(self, output_path: str) -> None:
        """Writes all declarations to a single .d.ts file."""
        write_file(output_path, self.definitions_text + '\n')

    def write_modules(self, output_dir: str) -> None:
        """Writes one .d.ts file per class and an index.d.ts re-exporting them."""
        resolver = ModuleResolver(self)
        for unit_path, content in resolver.resolve().items():
            write_file(os.path.join(output_dir, *unit_path.split('/')), content + '\n')
        write_file(os.path.join(output_dir, 'index.d.ts'), resolver.generate_index())


def convert_descriptors_to_typescript(descriptor_path: str, ts_file_path: str, root_classes: Optional[List[str]] = None,
                                      modules: bool = False, **options) -> TypeScriptGenerator:
    """
    Convert a JSON descriptor document to TypeScript definitions.

    Args:
        descriptor_path: Path of the descriptor document.
        ts_file_path: Output .d.ts file, or output directory when modules is set.
        root_classes: Classes to start from. Defaults to every class in the document.
        modules: Emit one module per class instead of a single file.
        **options: Keyword arguments for TypeScriptGenerator.
    """
    registry = load_descriptor_file(descriptor_path)
    if not root_classes:
        root_classes = [descriptor.name for descriptor in registry]
    generator = TypeScriptGenerator(registry, root_classes, **options)
    if modules:
        generator.write_modules(ts_file_path)
    else:
        generator.write_definitions(ts_file_path)
    return generator
