import importlib

mod = "avroinfer"
class LazyLoader:
    """
    Lazy loader for the avroinfer functions so that pyarrow is only imported when needed.
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
        else:
            return self._load_module(f"{mod}.{item}")

# Define the public names and their corresponding module paths
_mappings = {
    "infer_schema": (f"{mod}.schemainference", "infer_schema"),
    "infer_schema_node": (f"{mod}.schemainference", "infer_schema_node"),
    "SchemaInferencer": (f"{mod}.schemainference", "SchemaInferencer"),
    "render_schema": (f"{mod}.schemanode", "render_schema"),
    "FieldTag": (f"{mod}.structtag", "FieldTag"),
    "describe_arrow_schema": (f"{mod}.arrowtypes", "describe_arrow_schema"),
    "describe_arrow_type": (f"{mod}.arrowtypes", "describe_arrow_type"),
    "convert_python_type_to_avro": (f"{mod}.pytoavro", "convert_python_type_to_avro"),
    "convert_parquet_to_avro": (f"{mod}.parquettoavro", "convert_parquet_to_avro"),
}

_lazy_loader = LazyLoader(_mappings)

def __getattr__(name):
    return getattr(_lazy_loader, name)
