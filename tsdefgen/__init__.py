import importlib

mod = "tsdefgen"
class LazyLoader:
    """
    Lazy loader for the tsdefgen functions so that importing the package does
    not pull in the generator until it is used.
    """
    def __init__(self, mappings):
        self._modules = {}
        self._mappings = mappings

    def _load_module(self, module_name):
        if module_name not in self._modules:
            self._modules[module_name] = importlib.import_module(module_name)
        return self._modules[module_name]

    def __getattr__(self, item):
        if item in self._mappings:
            module_name, attr_name = self._mappings[item]
            module = self._load_module(module_name)
            return getattr(module, attr_name)
        return self._load_module(f"{mod}.{item}")

# Public names and the modules that define them
_mappings = {
    "convert_descriptors_to_typescript": (f"{mod}.tsgenerator", "convert_descriptors_to_typescript"),
    "convert_python_to_typescript": (f"{mod}.pyintrospect", "convert_python_to_typescript"),
    "TypeScriptGenerator": (f"{mod}.tsgenerator", "TypeScriptGenerator"),
    "PythonIntrospector": (f"{mod}.pyintrospect", "PythonIntrospector"),
    "load_descriptors": (f"{mod}.descriptorloader", "load_descriptors"),
    "load_descriptor_file": (f"{mod}.descriptorloader", "load_descriptor_file"),
}

_lazy_loader = LazyLoader(_mappings)

def __getattr__(name):
    return getattr(_lazy_loader, name)
