import json
import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from tsdefgen.descriptorloader import load_descriptor_file, load_descriptors, parse_class, parse_type
from tsdefgen.descriptors import (ClassKind, DescriptorFormatError, DescriptorNotFoundError, TypeKind, TypeReference,
                                  Visibility, array_of, class_ref, generic_ref, map_of, primitive)

DESCRIPTORS_DIR = os.path.join(os.path.dirname(current_script_path), 'descriptors')


class TestParseType(unittest.TestCase):

    def test_shorthand(self):
        self.assertEqual(parse_type('string'), primitive(TypeKind.STRING))
        self.assertEqual(parse_type('integer?'), primitive(TypeKind.INTEGER, nullable=True))
        self.assertEqual(parse_type('shop.Widget?'), class_ref('shop.Widget', nullable=True))

    def test_bare_container_has_no_arguments(self):
        self.assertEqual(parse_type('array'), TypeReference(TypeKind.ARRAY))
        self.assertEqual(parse_type({'type': 'map', 'keys': 'string'}).arguments, (primitive(TypeKind.STRING),))

    def test_containers(self):
        self.assertEqual(parse_type({'type': 'array', 'items': 'string?', 'nullable': True}),
                         array_of(primitive(TypeKind.STRING, nullable=True), nullable=True))
        self.assertEqual(parse_type({'type': 'map', 'keys': 'string', 'values': 'float'}),
                         map_of(primitive(TypeKind.STRING), primitive(TypeKind.FLOAT)))
        self.assertEqual(parse_type({'type': 'set?', 'items': 'integer'}).kind, TypeKind.SET)

    def test_generic_and_class_arguments(self):
        type_ref = parse_type({'type': 'shop.Box', 'arguments': [{'type': 'generic', 'name': 'T'}, 'string']})
        self.assertEqual(type_ref, class_ref('shop.Box', generic_ref('T'), primitive(TypeKind.STRING)))

    def test_function(self):
        type_ref = parse_type({'type': 'function', 'parameters': ['integer', 'string?'],
                               'parameterNames': ['count', 'label'], 'returns': 'boolean'})
        self.assertEqual(type_ref.kind, TypeKind.FUNCTION)
        self.assertEqual(type_ref.parameter_names, ('count', 'label'))
        self.assertEqual(type_ref.result, primitive(TypeKind.BOOLEAN))
        self.assertIsNone(parse_type({'type': 'function'}).result)

    def test_function_parameter_names_must_match(self):
        with self.assertRaises(DescriptorFormatError):
            parse_type({'type': 'function', 'parameters': ['integer'], 'parameterNames': ['a', 'b']})

    def test_unknown(self):
        self.assertEqual(parse_type({'type': 'unknown', 'name': 'Union'}).kind, TypeKind.UNKNOWN)

    def test_invalid_nodes(self):
        for node in (42, '', '?', {'items': 'string'}, {'type': 7}):
            with self.assertRaises(DescriptorFormatError):
                parse_type(node, 'shop.Widget.x')


class TestParseClass(unittest.TestCase):

    def test_struct(self):
        klass = parse_class({
            'name': 'shop.Widget',
            'tsName': 'Gadget',
            'typeParameters': ['A', {'name': 'B', 'bounds': ['shop.Base']}],
            'supertypes': ['shop.Base'],
            'properties': [
                {'name': 'id', 'type': 'string', 'visibility': 'non-public'},
                {'name': 'label', 'type': 'string', 'deprecated': True},
                {'name': 'size', 'type': 'integer', 'deprecated': 'use dimensions', 'overriddenFrom': 'shop.Base'},
                {'name': 'resize', 'type': {'type': 'function'}, 'callable': True},
            ],
        })
        self.assertEqual(klass.kind, ClassKind.STRUCT)
        self.assertEqual(klass.ts_name, 'Gadget')
        self.assertEqual([p.name for p in klass.type_parameters], ['A', 'B'])
        self.assertEqual(klass.type_parameters[1].bounds, (class_ref('shop.Base'),))
        self.assertEqual(klass.properties[0].visibility, Visibility.NON_PUBLIC)
        self.assertEqual(klass.properties[1].deprecated, '')
        self.assertEqual(klass.properties[2].deprecated, 'use dimensions')
        self.assertEqual(klass.properties[2].overridden_from, 'shop.Base')
        self.assertTrue(klass.properties[3].is_callable)

    def test_enum(self):
        klass = parse_class({'name': 'shop.Direction', 'kind': 'enum', 'values': ['North', 'South']})
        self.assertTrue(klass.is_enum)
        self.assertEqual(klass.enum_values, ('North', 'South'))

    def test_invalid_classes(self):
        for node in ({}, {'name': ''}, {'name': 'shop.X', 'kind': 'record'},
                     {'name': 'shop.X', 'properties': [{'name': 'y'}]},
                     {'name': 'shop.X', 'properties': [{'name': 'y', 'type': 'string', 'visibility': 'internal'}]}):
            with self.assertRaises(DescriptorFormatError):
                parse_class(node)


class TestLoadDescriptors(unittest.TestCase):

    def test_load_file(self):
        registry = load_descriptor_file(os.path.join(DESCRIPTORS_DIR, 'sample.json'))
        self.assertIn('sample.Widget', registry)
        self.assertNotIn('sample.Missing', registry)
        self.assertEqual(registry.describe_class('sample.Direction').enum_values, ('North', 'West', 'South', 'East'))
        with self.assertRaises(DescriptorNotFoundError):
            registry.describe_class('sample.Missing')

    def test_load_string_and_dict(self):
        document = {'classes': [{'name': 'shop.Widget'}]}
        self.assertIn('shop.Widget', load_descriptors(document))
        self.assertIn('shop.Widget', load_descriptors(json.dumps(document)))

    def test_malformed_documents(self):
        with self.assertRaises(DescriptorFormatError):
            load_descriptor_file(os.path.join(DESCRIPTORS_DIR, 'malformed.json'))
        with self.assertRaises(DescriptorFormatError):
            load_descriptors('{"classes": ')
        with self.assertRaises(DescriptorFormatError):
            load_descriptors('[]')

    def test_ancestors(self):
        registry = load_descriptor_file(os.path.join(DESCRIPTORS_DIR, 'sample.json'))
        self.assertEqual(registry.ancestors('sample.DerivedClass'), ['sample.BaseClass'])
        self.assertTrue(registry.is_subclass_of('sample.DerivedClass', 'sample.BaseClass'))
        self.assertFalse(registry.is_subclass_of('sample.BaseClass', 'sample.DerivedClass'))


if __name__ == '__main__':
    unittest.main()
