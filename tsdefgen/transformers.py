"""
Class transformers customize how each class is emitted.

A transformer is a record of optional hooks. The pipeline applies them in
order and every stage sees the cumulative result of the stages before it:

    filter_properties(properties, klass) -> properties
    rename_property(name, prop, klass) -> name
    retype_property(type_ref, prop, klass) -> type_ref

A hook that is not set behaves as identity.
"""

# pylint: disable=line-too-long

from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Sequence, Tuple

from tsdefgen.descriptors import ClassDescriptor, PropertyDescriptor, TypeReference

PropertyFilter = Callable[[List[PropertyDescriptor], ClassDescriptor], List[PropertyDescriptor]]
PropertyRenamer = Callable[[str, PropertyDescriptor, ClassDescriptor], str]
PropertyRetyper = Callable[[TypeReference, PropertyDescriptor, ClassDescriptor], TypeReference]
SubclassPredicate = Callable[[str, str], bool]


@dataclass(frozen=True)
class ClassTransformer:
    filter_properties: Optional[PropertyFilter] = None
    rename_property: Optional[PropertyRenamer] = None
    retype_property: Optional[PropertyRetyper] = None
    # the stage only applies to classes extending every anchor
    anchors: Tuple[str, ...] = ()


def only_on_subclasses_of(transformer: ClassTransformer, anchor: str) -> ClassTransformer:
    """Scopes a transformer to anchor and its subclasses. Outside that scope it is a no-op."""
    return replace(transformer, anchors=transformer.anchors + (anchor,))


class ClassTransformerPipeline:
    """ Applies an ordered list of class transformers """

    def __init__(self, transformers: Sequence[ClassTransformer], is_subclass_of: SubclassPredicate) -> None:
        self.transformers = list(transformers)
        self.is_subclass_of = is_subclass_of

    def _stages_for(self, klass: ClassDescriptor) -> List[ClassTransformer]:
        return [t for t in self.transformers
                if all(self.is_subclass_of(klass.name, anchor) for anchor in t.anchors)]

    def transform_property_list(self, properties: List[PropertyDescriptor], klass: ClassDescriptor) -> List[PropertyDescriptor]:
        for stage in self._stages_for(klass):
            if stage.filter_properties is not None:
                properties = list(stage.filter_properties(properties, klass))
        return properties

    def transform_property_name(self, name: str, prop: PropertyDescriptor, klass: ClassDescriptor) -> str:
        for stage in self._stages_for(klass):
            if stage.rename_property is not None:
                name = stage.rename_property(name, prop, klass)
        return name

    def transform_property_type(self, type_ref: TypeReference, prop: PropertyDescriptor, klass: ClassDescriptor) -> TypeReference:
        for stage in self._stages_for(klass):
            if stage.retype_property is not None:
                type_ref = stage.retype_property(type_ref, prop, klass)
        return type_ref
