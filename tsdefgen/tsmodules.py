""" Splits generated definitions into one TypeScript module per class """

# pylint: disable=line-too-long

import posixpath
from typing import Dict, List

from tsdefgen.common import namespace_of, pascal, process_template


class ModuleResolver:
    """
    Maps each generated class to a unit path (namespace path + TypeScript name
    + .d.ts) and prefixes its declaration with one import per class it
    references directly.

    Args:
        generator: A TypeScriptGenerator that has completed its traversal.
    """

    def __init__(self, generator) -> None:
        self.generator = generator

    def ts_name(self, class_name: str) -> str:
        return self.generator.class_ts_name(self.generator.registry.describe_class(class_name))

    def unit_path(self, class_name: str) -> str:
        """e.g. 'shop.model.Widget' -> 'shop/model/Widget.d.ts'"""
        namespace = namespace_of(class_name)
        file_name = f"{self.ts_name(class_name)}.d.ts"
        if not namespace:
            return file_name
        return '/'.join(namespace.split('.') + [file_name])

    def import_path(self, from_class: str, to_class: str) -> str:
        """Relative import specifier from one unit to another, in the form TypeScript resolves to a .d.ts."""
        from_dir = posixpath.dirname(self.unit_path(from_class)) or '.'
        target = self.unit_path(to_class)[:-len('.d.ts')]
        relative_import_path = posixpath.relpath(target, from_dir)
        if not relative_import_path.startswith('.'):
            relative_import_path = f'./{relative_import_path}'
        return relative_import_path + '.js'

    def alias(self, class_name: str, name: str) -> str:
        """Name qualified with the PascalCase namespace parts, e.g. 'shop.model.Item' -> 'Shop_Model_Item'. Top-level classes get '_Item'."""
        return '_'.join(pascal(part) for part in namespace_of(class_name).split('.') if part) + '_' + name

    def resolve(self) -> Dict[str, str]:
        """
        Unit path -> full unit text, imports followed by the exported declaration.

        A dependency whose TypeScript name clashes with another dependency of
        the unit, or with the unit's own name, is imported under its alias and
        the declaration is emitted again referring to that alias.
        """
        units: Dict[str, str] = {}
        dependencies = self.generator.state.dependencies
        for class_name, declaration in self.generator.state.definitions.items():
            own_name = self.ts_name(class_name)
            dependency_names = sorted(dependencies.get(class_name, []))
            ts_names = [self.ts_name(dependency) for dependency in dependency_names]
            aliases: Dict[str, str] = {}
            imports = []
            for dependency, name in zip(dependency_names, ts_names):
                import_name = name
                if ts_names.count(name) > 1 or name == own_name:
                    aliases[dependency] = self.alias(dependency, name)
                    import_name = f"{name} as {aliases[dependency]}"
                imports.append({'name': import_name, 'path': self.import_path(class_name, dependency)})
            if aliases:
                declaration = self.generator.generate_with_aliases(class_name, aliases)
            units[self.unit_path(class_name)] = process_template(
                "tsdefs/module.d.ts.jinja",
                imports=imports,
                declaration=declaration,
            )
        return units

    def generate_index(self) -> str:
        """An index module re-exporting every unit. Clashing names are aliased with their namespace."""
        class_names = sorted(self.generator.state.definitions)
        names = [self.ts_name(class_name) for class_name in class_names]
        exports: List[Dict[str, str]] = []
        for class_name, name in zip(class_names, names):
            export_name = name
            if names.count(name) > 1:
                export_name = f"{name} as {self.alias(class_name, name)}"
            exports.append({'name': export_name, 'path': './' + self.unit_path(class_name)[:-len('.d.ts')] + '.js'})
        return process_template("tsdefs/index.d.ts.jinja", exports=exports)
