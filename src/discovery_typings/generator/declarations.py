"""Declaration generator — renders index.d.ts for one REST description."""

from discovery_typings.config import Configuration
from discovery_typings.errors import MalformedDocumentError
from discovery_typings.generator.types import get_method_return, get_type, is_empty_schema, write_schema_properties
from discovery_typings.generator.writer import IndentedTextWriter, Parameter, TypeRendering, TypescriptTextWriter
from discovery_typings.naming import (
    TYPE_NAMESPACE,
    check_exists,
    format_property_name,
    format_revision,
    get_resource_type_name,
    parse_version,
)
from discovery_typings.parser.base import JsonSchema, RestDescription, RestMethod, RestResource
from discovery_typings.parser.discovery import method_in_namespace

GENERATED_DISCLAIMER = [
    "IMPORTANT",
    "This file was generated by discovery-typings. Please do not edit it manually.",
    "In case of any problems please regenerate it from the discovery document instead of patching it.",
]

# Reserved words that cannot be declared as `const` exports
EXCLUDED_RESOURCE_EXPORTS = {"debugger"}

DEPRECATED_LOAD = "@deprecated Please load APIs with discovery documents."


def write_generated_disclaimer(writer: TypescriptTextWriter) -> None:
    for line in GENERATED_DISCLAIMER:
        writer.write_line(f"// {line}")


def create_writer(config: Configuration) -> TypescriptTextWriter:
    """A declaration writer rendering into memory."""
    return TypescriptTextWriter(IndentedTextWriter(), config.max_line_length, config.banned_types)


def get_method_name(method_id: str) -> str:
    """Short method name: text after the last dot of the method ID."""
    return method_id.split(".")[-1]


def request_parameters_writer(
    parameters: dict[str, JsonSchema],
    schemas: dict[str, JsonSchema],
    ref: str | None = None,
):
    """Callback writing the anonymous ``request`` object type of a method."""

    def write_request_parameters(writer: TypescriptTextWriter) -> None:
        def body(w: TypescriptTextWriter) -> None:
            for key, data in parameters.items():
                if data.description:
                    w.comment(data.description)
                w.property(key, get_type(data, schemas), data.required)

            if ref:
                w.comment("Request body")
                w.property("resource", ref, True)

        writer.anonymous_type(body)

    return write_request_parameters


class DeclarationGenerator:
    """Renders the TypeScript declaration file of an API."""

    def __init__(self, config: Configuration):
        self.config = config

    def generate(self, description: RestDescription, source: str, namespaces: list[str]) -> str:
        """Render index.d.ts and return its text."""
        writer = create_writer(self.config)
        self._write_header(writer, description, source)
        writer.reference_types(TYPE_NAMESPACE)
        writer.declare_namespace(
            TYPE_NAMESPACE,
            lambda w: self._write_client_namespace(w, description, source, namespaces),
        )
        text = writer.getvalue()
        writer.end()
        return text

    # -- header ---------------------------------------------------------------

    def _write_header(self, writer: TypescriptTextWriter, description: RestDescription, source: str) -> None:
        title = check_exists(description.title)
        version = check_exists(description.version)
        if not description.documentation_link:
            raise MalformedDocumentError(
                f"No documentationLink found for service with ID {description.id}, can't write required Project header"
            )

        writer.write_line(f"/* Type definitions for non-npm package {title} {version} {parse_version(version)} */")
        writer.write_line(f"// Project: {description.documentation_link}")
        for index, owner in enumerate(self.config.owners):
            if index == 0:
                writer.write_line(f"// Definitions by: {owner}")
            else:
                writer.write_line(f"//                 {owner}")
        writer.write_line("// Definitions: https://github.com/DefinitelyTyped/DefinitelyTyped")
        writer.write_line("// TypeScript Version: 2.8")
        writer.write_line()
        write_generated_disclaimer(writer)
        writer.write_line(f"// Generated from: {source}")
        writer.write_line(format_revision(description.revision))
        writer.write_line()

    # -- gapi.client namespace ------------------------------------------------

    def _write_client_namespace(
        self,
        writer: TypescriptTextWriter,
        description: RestDescription,
        source: str,
        namespaces: list[str],
    ) -> None:
        self._write_load_functions(writer, description, source)
        writer.end_line()

        for namespace in namespaces:
            writer.namespace(namespace, lambda w, ns=namespace: self._write_api_namespace(w, description, ns))

    def _write_load_functions(self, writer: TypescriptTextWriter, description: RestDescription, source: str) -> None:
        name = f'"{description.name}"'
        version = f'"{description.version}"'

        writer.comment(f"Load {description.title} {description.version}")
        writer.method("function load", [Parameter("urlOrObject", f'"{source}"')], "PromiseLike<void>", True)

        writer.comment(DEPRECATED_LOAD)
        writer.method(
            "function load",
            [Parameter("name", name), Parameter("version", version)],
            "PromiseLike<void>",
            True,
        )

        writer.comment(DEPRECATED_LOAD)
        writer.method(
            "function load",
            [Parameter("name", name), Parameter("version", version), Parameter("callback", "() => any")],
            "void",
            True,
        )

    def _write_api_namespace(self, writer: TypescriptTextWriter, description: RestDescription, namespace: str) -> None:
        schemas = check_exists(description.schemas)
        self.write_schemas(writer, schemas)

        if description.resources:
            written = self.write_resources(
                writer, description.resources, description.parameters or {}, schemas, namespace
            )
            for resource_name in written:
                if resource_name in EXCLUDED_RESOURCE_EXPORTS:
                    continue
                writer.end_line()
                writer.write_line(f"const {resource_name}: {get_resource_type_name(resource_name)};")

    def write_schemas(self, writer: TypescriptTextWriter, schemas: dict[str, JsonSchema]) -> None:
        """One interface per schema of the registry."""
        for schema in schemas.values():
            writer.interface(
                check_exists(schema.id),
                lambda w, s=schema: write_schema_properties(w, s, schemas),
                is_empty_schema(schema),
            )

    # -- resources ------------------------------------------------------------

    def write_resources(
        self,
        writer: TypescriptTextWriter,
        resources: dict[str, RestResource],
        parameters: dict[str, JsonSchema],
        schemas: dict[str, JsonSchema],
        namespace: str,
    ) -> list[str]:
        """Write one interface per resource that has methods in namespace.

        Nested resources are written first. Returns the sorted, deduplicated
        names of the resources written at this level.
        """
        written: list[str] = []

        for resource_name, resource in resources.items():
            if resource.resources is not None:
                self.write_resources(writer, resource.resources, parameters, schemas, namespace)

            all_methods = list((resource.methods or {}).values())
            methods = [m for m in all_methods if method_in_namespace(m, namespace)]
            supposed_to_be_empty = not all_methods and not resource.resources

            if not supposed_to_be_empty and not methods:
                # belongs to another namespace
                continue

            written.append(resource_name)
            writer.interface(
                get_resource_type_name(resource_name),
                lambda w, r=resource, ms=methods: self._write_resource_body(w, r, ms, parameters, schemas),
                supposed_to_be_empty,
            )

        return sorted(set(written))

    def _write_resource_body(
        self,
        writer: TypescriptTextWriter,
        resource: RestResource,
        methods: list[RestMethod],
        parameters: dict[str, JsonSchema],
        schemas: dict[str, JsonSchema],
    ) -> None:
        for method in methods:
            if method.description:
                writer.comment(method.description)

            request_ref = method.request.ref if method.request else None
            merged = {**parameters, **(method.parameters or {})}
            request_parameters = {key: merged[key] for key in sorted(merged)}
            name = format_property_name(get_method_name(check_exists(method.id)))
            return_type = get_method_return(method, schemas)

            if "resource" not in request_parameters or not request_ref:
                # method(request)
                writer.method(
                    name,
                    [
                        Parameter(
                            "request",
                            TypeRendering.nested(request_parameters_writer(request_parameters, schemas, request_ref)),
                            bool(request_ref),
                        )
                    ],
                    return_type,
                )

            if request_ref:
                # method(request, body)
                writer.method(
                    name,
                    [
                        Parameter("request", TypeRendering.nested(request_parameters_writer(request_parameters, schemas))),
                        Parameter("body", request_ref),
                    ],
                    return_type,
                )

        for child_name in (resource.resources or {}):
            writer.property(child_name, get_resource_type_name(child_name))
