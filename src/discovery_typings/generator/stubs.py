"""Stub generator — example values and the tests.ts usage file of an API.

Stub values are synthesized by walking the schema graph. Schemas currently
being expanded are tracked so that recursive references end in an
``undefined`` placeholder instead of recursing forever.
"""

from discovery_typings.config import Configuration
from discovery_typings.errors import MalformedDocumentError
from discovery_typings.generator.declarations import create_writer, write_generated_disclaimer
from discovery_typings.generator.writer import TypescriptTextWriter
from discovery_typings.naming import check_exists, format_property_name, format_revision, get_package_name
from discovery_typings.parser.base import JsonSchema, OAuth2, RestDescription, RestResource, SchemaShape
from discovery_typings.parser.discovery import method_in_namespace

SCALAR_STUBS = {
    "number": "42",
    "integer": "42",
    "boolean": "true",
    "string": '"Test string"',
    "any": "42",
    "object": "{}",
}

UNDEFINED = "undefined"
MAP_PLACEHOLDER_KEY = "A"


def member_access(name: str) -> str:
    """Property access for name: ``.name``, or ``["x-y"]`` when the name needs quoting."""
    quoted = format_property_name(name)
    return f"[{quoted}]" if quoted != name else f".{name}"


class StubValueGenerator:
    """Writes example literal values for schema nodes."""

    def __init__(self, writer: TypescriptTextWriter, schemas: dict[str, JsonSchema]):
        self.writer = writer
        self.schemas = schemas
        self.seen_schema_refs: set[str] = set()

    def write_value(self, node: JsonSchema) -> None:
        shape = node.shape
        if shape is SchemaShape.REFERENCE:
            self.write_schema_ref(node.ref)
        elif shape is SchemaShape.ARRAY:
            self.write_array(check_exists(node.items))
        elif shape in (SchemaShape.OBJECT, SchemaShape.MAP):
            self.write_object(node)
        elif shape is SchemaShape.SCALAR:
            self._write_scalar(node.type)
        else:
            raise MalformedDocumentError(f"Cannot generate stub for schema {node.id or '<anonymous>'} without a type")

    def _write_scalar(self, kind: str) -> None:
        try:
            self.writer.write(SCALAR_STUBS[kind])
        except KeyError:
            raise MalformedDocumentError(f"Unknown scalar type {kind}") from None

    def write_array(self, items: JsonSchema) -> None:
        if items.ref and items.ref in self.seen_schema_refs:
            self.writer.write(UNDEFINED)
            return

        def body(scope: TypescriptTextWriter) -> None:
            scope.new_line()
            self.write_value(items)
            scope.end_line(",")

        self.writer.scope(body, "[", "]")

    def write_object(self, node: JsonSchema) -> None:
        value_type = node.additional_properties
        if value_type and value_type.ref and value_type.ref in self.seen_schema_refs:
            self.writer.write(UNDEFINED)
            return

        if node.properties:
            self.writer.scope(lambda scope: self.write_properties(node.properties))
        elif value_type:
            # map: write a single placeholder key
            def body(scope: TypescriptTextWriter) -> None:
                scope.new_line(f"{MAP_PLACEHOLDER_KEY}: ")
                self.write_value(value_type)
                scope.end_line(",")

            self.writer.scope(body)
        else:
            self.writer.write(SCALAR_STUBS["object"])

    def write_schema_ref(self, schema_name: str) -> None:
        """Write the stub of a named schema, or a placeholder when it is already being expanded."""
        if schema_name in self.seen_schema_refs:
            self.writer.write(UNDEFINED)
            return

        schema = self.schemas.get(schema_name)
        if schema is None:
            raise MalformedDocumentError(f"Attempted to generate stub for unknown schema '{schema_name}'")

        self.seen_schema_refs.add(schema_name)
        try:
            self.write_value(schema)
        finally:
            self.seen_schema_refs.discard(schema_name)

    def write_properties(self, record: dict[str, JsonSchema]) -> None:
        for name, node in record.items():
            if node.description:
                self.writer.comment(node.description)
            self.writer.new_line(f"{format_property_name(name)}: ")
            self.write_value(node)
            self.writer.end_line(",")


class StubFileGenerator:
    """Renders tests.ts: a usage example calling every method of an API."""

    def __init__(self, config: Configuration):
        self.config = config

    def generate(self, description: RestDescription, source: str, namespaces: list[str]) -> str:
        """Render tests.ts and return its text."""
        writer = create_writer(self.config)
        stubs = StubValueGenerator(writer, description.schemas or {})

        writer.write_line(f"/* This is stub file for {get_package_name(description)} definition tests */")
        write_generated_disclaimer(writer)
        writer.write_line()
        writer.write_line(format_revision(description.revision))
        writer.write_line()
        writer.new_line("gapi.load('client', async () => ")
        writer.scope(lambda w: self._write_client_body(w, stubs, description, source, namespaces))
        writer.end_line(");")

        text = writer.getvalue()
        writer.end()
        return text

    def _write_client_body(
        self,
        writer: TypescriptTextWriter,
        stubs: StubValueGenerator,
        description: RestDescription,
        source: str,
        namespaces: list[str],
    ) -> None:
        writer.comment("now we can use gapi.client")
        writer.end_line()
        writer.write_line(f"await gapi.client.load('{source}');")
        writer.comment("now we can use " + ", ".join(f"gapi.client.{ns}" for ns in namespaces))
        writer.end_line()

        if description.auth and description.auth.oauth2 and description.auth.oauth2.scopes:
            self._write_authorization(writer, description.auth.oauth2)
        else:
            writer.write_line("run();")

        writer.end_line()
        writer.new_line("async function run() ")
        writer.scope(lambda w: self._write_calls(w, stubs, description, namespaces))
        writer.end_line()

    def _write_authorization(self, writer: TypescriptTextWriter, oauth2: OAuth2) -> None:
        writer.comment("don't forget to authenticate your client before sending any request to resources:")
        writer.comment("declare client_id registered in Google Developers Console")
        writer.write_line("const client_id = '<<PUT YOUR CLIENT ID HERE>>';")
        writer.new_line("const scope = ")

        def scopes(w: TypescriptTextWriter) -> None:
            for scope, value in oauth2.scopes.items():
                w.comment(value.description)
                w.write_line(f"'{scope}',")

        writer.scope(scopes, "[", "]")
        writer.end_line(";")
        writer.write_line("const immediate = false;")
        writer.new_line("gapi.auth.authorize({ client_id, scope, immediate }, authResult => ")

        def on_success(w: TypescriptTextWriter) -> None:
            w.comment("handle successful authorization")
            w.write_line("run();")

        def on_authorized(w: TypescriptTextWriter) -> None:
            w.new_line("if (authResult && !authResult.error) ")
            w.scope(on_success)
            w.write(" else ")
            w.scope(lambda a: a.comment("handle authorization error"))
            w.end_line()

        writer.scope(on_authorized)
        writer.end_line(");")

    def _write_calls(
        self,
        writer: TypescriptTextWriter,
        stubs: StubValueGenerator,
        description: RestDescription,
        namespaces: list[str],
    ) -> None:
        for namespace in namespaces:
            for resource_name, resource in (description.resources or {}).items():
                self._write_resource_calls(writer, stubs, f"gapi.client.{namespace}", resource_name, resource, namespace)

    def _write_resource_calls(
        self,
        writer: TypescriptTextWriter,
        stubs: StubValueGenerator,
        ancestors: str,
        resource_name: str,
        resource: RestResource,
        namespace: str,
    ) -> None:
        path = f"{ancestors}{member_access(resource_name)}"
        for method_name, method in (resource.methods or {}).items():
            if not method_in_namespace(method, namespace):
                continue

            writer.comment(method.description)
            writer.new_line(f"await {path}{member_access(method_name)}(")

            params = method.parameters
            ref = method.request.ref if method.request else None
            if params:
                writer.scope(lambda w: stubs.write_properties(params))
            if ref:
                if not params:
                    writer.write("{}")
                writer.write(", ")
                stubs.write_schema_ref(ref)
            writer.end_line(");")

        for child_name, child in (resource.resources or {}).items():
            self._write_resource_calls(writer, stubs, path, child_name, child, namespace)
