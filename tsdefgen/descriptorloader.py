"""
Loads class descriptors from JSON descriptor documents.

A document is an object with a "classes" list. Each class has a qualified
"name", a "kind" ("struct" or "enum"), and either "properties",
"supertypes" and "typeParameters", or "values" for enums. Types are written
as strings ("string", "integer?", "shop.Widget") or as objects with a "type"
key ("array", "set", "map", "generic", "function", or a class name).
"""

# pylint: disable=line-too-long

import json
from typing import Any, Dict, List, Union

from tsdefgen.descriptors import (ClassDescriptor, ClassKind, DescriptorFormatError, DescriptorRegistry,
                                  GenericParameter, PropertyDescriptor, TypeKind, TypeReference, Visibility)

PRIMITIVE_TYPES = {
    'boolean': TypeKind.BOOLEAN,
    'string': TypeKind.STRING,
    'integer': TypeKind.INTEGER,
    'float': TypeKind.FLOAT,
    'any': TypeKind.ANY,
}

CONTAINER_TYPES = {
    'array': TypeKind.ARRAY,
    'set': TypeKind.SET,
    'map': TypeKind.MAP,
}


def parse_type(type_node: Union[str, Dict[str, Any]], context: str = '') -> TypeReference:
    """
    Parse a type node of a descriptor document.

    Args:
        type_node: A string shorthand or a type object.
        context: Location of the node, used in error messages.

    Returns:
        TypeReference: The parsed type reference.
    """
    if isinstance(type_node, str):
        nullable = type_node.endswith('?')
        type_name = type_node[:-1] if nullable else type_node
        if not type_name:
            raise DescriptorFormatError("Empty type name", context)
        if type_name in PRIMITIVE_TYPES:
            return TypeReference(PRIMITIVE_TYPES[type_name], nullable=nullable)
        if type_name in CONTAINER_TYPES:
            # a bare container has no element types, rendered with the top type
            return TypeReference(CONTAINER_TYPES[type_name], nullable=nullable)
        return TypeReference(TypeKind.CLASS, type_name, nullable=nullable)

    if not isinstance(type_node, dict) or not isinstance(type_node.get('type'), str):
        raise DescriptorFormatError(f"Invalid type node {json.dumps(type_node)}", context)

    type_name: str = type_node['type']
    nullable = bool(type_node.get('nullable', False))
    if type_name.endswith('?'):
        type_name = type_name[:-1]
        nullable = True

    if type_name in PRIMITIVE_TYPES:
        return TypeReference(PRIMITIVE_TYPES[type_name], nullable=nullable)
    if type_name in ('array', 'set'):
        items = [parse_type(type_node['items'], context)] if 'items' in type_node else []
        return TypeReference(CONTAINER_TYPES[type_name], arguments=tuple(items), nullable=nullable)
    if type_name == 'map':
        arguments = []
        if 'keys' in type_node:
            arguments.append(parse_type(type_node['keys'], context))
            if 'values' in type_node:
                arguments.append(parse_type(type_node['values'], context))
        return TypeReference(TypeKind.MAP, arguments=tuple(arguments), nullable=nullable)
    if type_name == 'generic':
        return TypeReference(TypeKind.GENERIC, type_node.get('name', ''), nullable=nullable)
    if type_name == 'function':
        parameters = tuple(parse_type(parameter, context) for parameter in type_node.get('parameters', []))
        parameter_names = tuple(type_node.get('parameterNames', []))
        if parameter_names and len(parameter_names) != len(parameters):
            raise DescriptorFormatError("parameterNames must name every parameter", context)
        result = parse_type(type_node['returns'], context) if type_node.get('returns') is not None else None
        return TypeReference(TypeKind.FUNCTION, arguments=parameters, nullable=nullable,
                             result=result, parameter_names=parameter_names)
    if type_name == 'unknown':
        return TypeReference(TypeKind.UNKNOWN, type_node.get('name', ''), nullable=nullable)
    arguments = tuple(parse_type(argument, context) for argument in type_node.get('arguments', []))
    return TypeReference(TypeKind.CLASS, type_name, arguments, nullable)


def parse_property(property_node: Dict[str, Any], class_name: str) -> PropertyDescriptor:
    if not isinstance(property_node, dict) or 'name' not in property_node or 'type' not in property_node:
        raise DescriptorFormatError("A property needs a name and a type", class_name)
    name = property_node['name']
    context = f"{class_name}.{name}"
    visibility = property_node.get('visibility', 'public')
    try:
        visibility = Visibility(visibility)
    except ValueError as e:
        raise DescriptorFormatError(f"Unknown visibility '{visibility}'", context, e) from e
    deprecated = property_node.get('deprecated')
    if deprecated is True:
        deprecated = ''
    elif deprecated is False:
        deprecated = None
    return PropertyDescriptor(
        name=name,
        type=parse_type(property_node['type'], context),
        visibility=visibility,
        is_callable=bool(property_node.get('callable', False)),
        overridden_from=property_node.get('overriddenFrom'),
        deprecated=deprecated,
    )


def parse_class(class_node: Dict[str, Any]) -> ClassDescriptor:
    """Parse one entry of the "classes" list."""
    if not isinstance(class_node, dict) or not isinstance(class_node.get('name'), str) or not class_node['name']:
        raise DescriptorFormatError("A class needs a qualified name", json.dumps(class_node)[:80])
    name = class_node['name']
    kind = class_node.get('kind', 'struct')
    try:
        kind = ClassKind(kind)
    except ValueError as e:
        raise DescriptorFormatError(f"Unknown class kind '{kind}'", name, e) from e

    type_parameters = []
    for parameter in class_node.get('typeParameters', []):
        if isinstance(parameter, str):
            type_parameters.append(GenericParameter(parameter))
        else:
            bounds = tuple(parse_type(bound, name) for bound in parameter.get('bounds', []))
            type_parameters.append(GenericParameter(parameter['name'], bounds))

    return ClassDescriptor(
        name=name,
        kind=kind,
        properties=tuple(parse_property(p, name) for p in class_node.get('properties', [])),
        supertypes=tuple(parse_type(s, name) for s in class_node.get('supertypes', [])),
        type_parameters=tuple(type_parameters),
        enum_values=tuple(str(v) for v in class_node.get('values', [])),
        ts_name=class_node.get('tsName'),
    )


def load_descriptors(document: Union[str, Dict[str, Any]]) -> DescriptorRegistry:
    """
    Build a registry from a descriptor document.

    Args:
        document: The document as a JSON string or an already parsed object.

    Returns:
        DescriptorRegistry: A registry holding every class of the document.
    """
    if isinstance(document, str):
        try:
            document = json.loads(document)
        except json.JSONDecodeError as e:
            raise DescriptorFormatError("Descriptor document is not valid JSON", cause=e) from e
    if not isinstance(document, dict) or not isinstance(document.get('classes'), list):
        raise DescriptorFormatError("Descriptor document must be an object with a 'classes' list")
    classes: List[ClassDescriptor] = [parse_class(class_node) for class_node in document['classes']]
    return DescriptorRegistry(classes)


def load_descriptor_file(descriptor_path: str) -> DescriptorRegistry:
    """Build a registry from a descriptor document file."""
    with open(descriptor_path, 'r', encoding='utf-8') as file:
        return load_descriptors(file.read())
