"""Translate discovery JsonSchema nodes into TypeScript type renderings.

References are always rendered by name and resolved against the schema
registry at render time, so self-referential schemas never get expanded.
"""

from discovery_typings.errors import MalformedDocumentError
from discovery_typings.generator.writer import FLAT, NESTED, TypeRendering, TypescriptTextWriter
from discovery_typings.naming import check_exists
from discovery_typings.parser.base import JsonSchema, RestMethod, SchemaShape

ANY_TYPE = "any"

SCALAR_TYPES = {
    "integer": "number",
    "number": "number",
    "string": "string",
    "boolean": "boolean",
    "object": ANY_TYPE,
    "any": ANY_TYPE,
}

INDEX_SIGNATURE = "[key: string]"


def is_empty_schema(schema: JsonSchema) -> bool:
    """A schema with neither named properties nor a uniform value type."""
    return not schema.properties and not schema.additional_properties


def get_scalar_type(kind: str) -> str:
    try:
        return SCALAR_TYPES[kind]
    except KeyError:
        raise MalformedDocumentError(f"Unknown scalar type {kind}") from None


def get_type(schema: JsonSchema, schemas: dict[str, JsonSchema]) -> TypeRendering:
    """Render a schema node as a flat type token or a nested-type callback."""
    shape = schema.shape

    if shape is SchemaShape.ARRAY:
        return _array_type(get_type(check_exists(schema.items), schemas))

    if shape is SchemaShape.OBJECT:
        return TypeRendering.nested(_object_type_writer(schema, schemas))

    if shape is SchemaShape.MAP:
        return TypeRendering.nested(_map_type_writer(schema, schemas))

    if shape is SchemaShape.SCALAR:
        ts_type = get_scalar_type(schema.type)
        return TypeRendering.flat(f"{ts_type} | {ts_type}[]" if schema.repeated else ts_type)

    if shape is SchemaShape.REFERENCE:
        referenced = schemas.get(schema.ref)
        if referenced is None:
            raise MalformedDocumentError(f"Unknown schema reference {schema.ref}")
        if is_empty_schema(referenced):
            return TypeRendering.flat(ANY_TYPE)
        return TypeRendering.flat(schema.ref)

    raise MalformedDocumentError(f"Schema {schema.id or '<anonymous>'} declares neither a type nor a $ref")


def _array_type(child: TypeRendering) -> TypeRendering:
    if child.kind == FLAT:
        return TypeRendering.flat(f"{child.token}[]")
    elif child.kind == NESTED:
        def write_array(writer: TypescriptTextWriter) -> None:
            writer.write("Array<")
            writer.write(child)
            writer.write(">")

        return TypeRendering.nested(write_array)
    else:
        return TypeRendering.flat("[]")


def write_schema_properties(writer: TypescriptTextWriter, schema: JsonSchema, schemas: dict[str, JsonSchema]) -> None:
    """Write one property per member, plus an index signature for additionalProperties."""
    for name, prop in (schema.properties or {}).items():
        if prop.description:
            writer.comment(prop.description)
        writer.property(name, get_type(prop, schemas), prop.required)

    if schema.additional_properties:
        writer.property(INDEX_SIGNATURE, get_type(schema.additional_properties, schemas))


def _object_type_writer(schema: JsonSchema, schemas: dict[str, JsonSchema]):
    def write_object(writer: TypescriptTextWriter) -> None:
        writer.anonymous_type(lambda w: write_schema_properties(w, schema, schemas))

    return write_object


def _map_type_writer(schema: JsonSchema, schemas: dict[str, JsonSchema]):
    # Mapped type instead of Record<string, T>: Record trips a scoping bug in
    # consumers that declare their own `Record` interface.
    def write_map(writer: TypescriptTextWriter) -> None:
        child = get_type(check_exists(schema.additional_properties), schemas)
        writer.write("{ [P in string]: ")
        writer.write(child)
        writer.write(" }")

    return write_map


def get_method_return(method: RestMethod, schemas: dict[str, JsonSchema]) -> str:
    """Return type of a method call, e.g. ``Request<File>``."""
    name = "client.Request" if "Request" in schemas else "Request"

    if method.response:
        ref = check_exists(method.response.ref)
        schema = schemas.get(ref)
        if schema is not None and schema.properties:
            return f"{name}<{ref}>"
        return f"{name}<{{}}>"
    return f"{name}<void>"
