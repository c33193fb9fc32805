import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from tsdefgen.descriptors import ClassDescriptor, DescriptorRegistry, PropertyDescriptor, TypeKind, class_ref, primitive
from tsdefgen.transformers import ClassTransformer, ClassTransformerPipeline, only_on_subclasses_of

BASE = ClassDescriptor('sample.Base', properties=(PropertyDescriptor('a', primitive(TypeKind.INTEGER)),))
DERIVED = ClassDescriptor('sample.Derived', supertypes=(class_ref('sample.Base'),),
                          properties=(PropertyDescriptor('b', primitive(TypeKind.STRING)),))
OTHER = ClassDescriptor('sample.Other', properties=(PropertyDescriptor('c', primitive(TypeKind.STRING)),))


def suffix(text):
    return ClassTransformer(rename_property=lambda name, prop, klass: name + text)


class TestClassTransformerPipeline(unittest.TestCase):

    def setUp(self):
        self.registry = DescriptorRegistry([BASE, DERIVED, OTHER])

    def pipeline(self, *transformers):
        return ClassTransformerPipeline(transformers, self.registry.is_subclass_of)

    def test_renames_apply_in_order(self):
        pipeline = self.pipeline(suffix('1'), ClassTransformer(), suffix('2'))
        prop = BASE.properties[0]
        self.assertEqual(pipeline.transform_property_name('a', prop, BASE), 'a12')

    def test_empty_pipeline_is_identity(self):
        pipeline = self.pipeline()
        prop = BASE.properties[0]
        self.assertEqual(pipeline.transform_property_name('a', prop, BASE), 'a')
        self.assertEqual(pipeline.transform_property_type(prop.type, prop, BASE), prop.type)
        self.assertEqual(pipeline.transform_property_list(list(BASE.properties), BASE), list(BASE.properties))

    def test_filters_see_previous_result(self):
        seen = []

        def record(properties, klass):
            seen.extend(p.name for p in properties)
            return properties

        drop_b = ClassTransformer(filter_properties=lambda properties, klass: [p for p in properties if p.name != 'b'])
        pipeline = self.pipeline(drop_b, ClassTransformer(filter_properties=record))
        properties = list(BASE.properties) + list(DERIVED.properties)
        self.assertEqual(pipeline.transform_property_list(properties, DERIVED), list(BASE.properties))
        self.assertEqual(seen, ['a'])

    def test_retype(self):
        nullable_int = primitive(TypeKind.INTEGER, nullable=True)
        pipeline = self.pipeline(ClassTransformer(retype_property=lambda type_ref, prop, klass: nullable_int))
        prop = OTHER.properties[0]
        self.assertEqual(pipeline.transform_property_type(prop.type, prop, OTHER), nullable_int)

    def test_scoped_transformer_applies_to_anchor_and_subclasses(self):
        pipeline = self.pipeline(only_on_subclasses_of(suffix('!'), 'sample.Base'))
        self.assertEqual(pipeline.transform_property_name('a', BASE.properties[0], BASE), 'a!')
        self.assertEqual(pipeline.transform_property_name('b', DERIVED.properties[0], DERIVED), 'b!')
        self.assertEqual(pipeline.transform_property_name('c', OTHER.properties[0], OTHER), 'c')

    def test_nested_scopes_require_every_anchor(self):
        scoped = only_on_subclasses_of(only_on_subclasses_of(suffix('!'), 'sample.Base'), 'sample.Derived')
        pipeline = self.pipeline(scoped)
        self.assertEqual(scoped.anchors, ('sample.Base', 'sample.Derived'))
        self.assertEqual(pipeline.transform_property_name('a', BASE.properties[0], BASE), 'a')
        self.assertEqual(pipeline.transform_property_name('b', DERIVED.properties[0], DERIVED), 'b!')


if __name__ == '__main__':
    unittest.main()
