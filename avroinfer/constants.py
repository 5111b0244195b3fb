"""Constants for the avroinfer package."""

# Annotation key consulted first for field names and overrides
AVRO_TAG_KEY = 'avro'

# Metadata key holding raw struct-tag text (`avro:"name,opt" json:"name"`)
RAW_TAG_METADATA_KEY = 'tag'

TYPE_OPTION_PREFIX = 'type='
ITEMS_OPTION_PREFIX = 'items='
VALUES_OPTION_PREFIX = 'values='
TOKEN_SEPARATOR = '|'

NULL_TYPE = 'null'
RECORD_TYPE = 'record'
ARRAY_TYPE = 'array'
MAP_TYPE = 'map'

# Structural case labels attached to errors while unwinding
POINTER_CASE = 'pointer'
STRUCT_CASE = 'struct'
SLICE_CASE = 'slice'
MAP_CASE = 'map'
DEFAULT_CASE = 'default'

DEFAULT_MAX_DEPTH = 64
