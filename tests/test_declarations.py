from pathlib import Path

import pytest

from discovery_typings.config import Configuration
from discovery_typings.errors import MalformedDocumentError
from discovery_typings.generator.declarations import DeclarationGenerator, create_writer, get_method_name
from discovery_typings.parser.base import JsonSchema, RestResource
from discovery_typings.parser.discovery import get_all_namespaces, load_rest_description

FIXTURES = Path(__file__).parent / "fixtures"
SOURCE = "https://library.example.com/$discovery/rest?version=v1"


def _config(**kwargs) -> Configuration:
    return Configuration(types_directory=Path("types"), max_line_length=80, **kwargs)


def _resources(data: dict) -> dict[str, RestResource]:
    return {name: RestResource.model_validate(value) for name, value in data.items()}


def _write_resources(resources: dict, parameters=None, schemas=None, namespace="api"):
    generator = DeclarationGenerator(_config())
    writer = create_writer(generator.config)
    written = generator.write_resources(writer, _resources(resources), parameters or {}, schemas or {}, namespace)
    return writer.getvalue(), written


@pytest.fixture
def library():
    return load_rest_description(FIXTURES / "library-v1.json")


class TestMethodName:
    def test_last_segment(self):
        assert get_method_name("drive.files.list") == "list"
        assert get_method_name("ping") == "ping"


class TestWriteResources:
    def test_single_overload_without_body(self):
        text, written = _write_resources({
            "res": {"methods": {"get": {"id": "api.res.get", "parameters": {"a": {"type": "string", "required": True}}}}},
        })
        assert text == (
            "interface ResResource {\n"
            "    get(request?: {\n"
            "        a: string;\n"
            "    }): Request<void>;\n"
            "}\n"
        )
        assert written == ["res"]

    def test_both_overloads_with_body(self):
        schemas = {"Body": JsonSchema.model_validate({"id": "Body", "type": "object", "properties": {"a": {"type": "string"}}})}
        text, _ = _write_resources({
            "res": {"methods": {"insert": {
                "id": "api.res.insert",
                "parameters": {"parent": {"type": "string", "required": True}},
                "request": {"$ref": "Body"},
                "response": {"$ref": "Body"},
            }}},
        }, schemas=schemas)
        assert text == (
            "interface ResResource {\n"
            "    insert(request: {\n"
            "        parent: string;\n"
            "        /** Request body */\n"
            "        resource: Body;\n"
            "    }): Request<Body>;\n"
            "    insert(request: {\n"
            "        parent: string;\n"
            "    },\n"
            "    body: Body): Request<Body>;\n"
            "}\n"
        )

    def test_resource_parameter_suppresses_first_overload(self):
        text, _ = _write_resources({
            "res": {"methods": {"insert": {
                "id": "api.res.insert",
                "parameters": {"resource": {"type": "string"}},
                "request": {"$ref": "Body"},
            }}},
        })
        assert text.count("insert(") == 1
        assert "body: Body" in text

    def test_global_parameters_are_merged_and_sorted(self):
        text, _ = _write_resources(
            {"res": {"methods": {"get": {"id": "api.res.get", "parameters": {"b": {"type": "string"}}}}}},
            parameters={"c": JsonSchema(type="string"), "a": JsonSchema(type="integer")},
        )
        assert text.index("a?: number;") < text.index("b?: string;") < text.index("c?: string;")

    def test_method_parameter_overrides_global(self):
        text, _ = _write_resources(
            {"res": {"methods": {"get": {"id": "api.res.get", "parameters": {"a": {"type": "string", "required": True}}}}}},
            parameters={"a": JsonSchema(type="integer")},
        )
        assert "a: string;" in text
        assert "number" not in text

    def test_skips_resources_of_other_namespaces(self):
        text, written = _write_resources({
            "mine": {"methods": {"get": {"id": "api.mine.get"}}},
            "theirs": {"methods": {"get": {"id": "other.theirs.get"}}},
        })
        assert "MineResource" in text
        assert "TheirsResource" not in text
        assert written == ["mine"]

    def test_empty_resource_is_written(self):
        text, written = _write_resources({"operations": {}})
        assert text == "// tslint:disable-next-line:no-empty-interface\ninterface OperationsResource {\n}\n"
        assert written == ["operations"]

    def test_nested_resources_first(self):
        text, written = _write_resources({
            "parent": {
                "methods": {"get": {"id": "api.parent.get"}},
                "resources": {"child": {"methods": {"get": {"id": "api.parent.child.get"}}}},
            },
        })
        assert text.index("interface ChildResource") < text.index("interface ParentResource")
        assert "    child: ChildResource;\n" in text
        assert written == ["parent"]

    def test_container_only_parent_is_skipped(self):
        text, written = _write_resources({
            "parent": {"resources": {"child": {"methods": {"get": {"id": "api.parent.child.get"}}}}},
        })
        assert "interface ChildResource {\n" in text
        assert "ParentResource" not in text
        assert written == []

    def test_quotes_method_names(self):
        text, _ = _write_resources({"res": {"methods": {"x-y": {"id": "api.res.x-y"}}}})
        assert '"x-y"(request?: {' in text

    def test_written_names_sorted(self):
        _, written = _write_resources({
            "b": {"methods": {"get": {"id": "api.b.get"}}},
            "a": {"methods": {"get": {"id": "api.a.get"}}},
        })
        assert written == ["a", "b"]


class TestDeclarationGenerator:
    def _generate(self, description, **config):
        generator = DeclarationGenerator(_config(**config))
        return generator.generate(description, SOURCE, get_all_namespaces(description))

    def test_header(self, library):
        text = self._generate(library)
        lines = text.splitlines()
        assert lines[0] == "/* Type definitions for non-npm package Library API v1 1.0 */"
        assert lines[1] == "// Project: https://example.com/library"
        assert lines[2] == "// Definitions by: discovery-typings contributors"
        assert "// TypeScript Version: 2.8" in lines
        assert f"// Generated from: {SOURCE}" in lines
        assert "// Revision: 20240101" in lines

    def test_multiple_owners(self, library):
        text = self._generate(library, owners=["Alice <https://a.example>", "Bob"])
        assert "// Definitions by: Alice <https://a.example>\n//                 Bob\n" in text

    def test_missing_documentation_link(self, library):
        library = library.model_copy(update={"documentation_link": None})
        with pytest.raises(MalformedDocumentError, match="documentationLink"):
            self._generate(library)

    def test_client_namespace(self, library):
        text = self._generate(library)
        assert '/// <reference types="gapi.client" />\n\ndeclare namespace gapi.client {\n' in text
        assert f'    function load(urlOrObject: "{SOURCE}"): PromiseLike<void>;\n' in text
        assert '    function load(name: "library", version: "v1"): PromiseLike<void>;\n' in text
        assert '    function load(name: "library", version: "v1", callback: () => any): void;\n' in text
        assert "    /** @deprecated Please load APIs with discovery documents. */\n" in text

    def test_one_namespace_per_method_prefix(self, library):
        text = self._generate(library)
        assert "    namespace libraryadmin {\n" in text
        assert "    namespace library {\n" in text

    def test_schemas(self, library):
        text = self._generate(library)
        assert "        interface Book {\n" in text
        assert "            related?: Book[];\n" in text
        assert "            extra?: any;\n" in text
        assert "            metadata?: { [P in string]: string };\n" in text
        assert "            author?: Author;\n" in text
        assert "        // tslint:disable-next-line:no-empty-interface\n        interface Empty {\n" in text

    def test_resource_exports(self, library):
        text = self._generate(library)
        assert "        const shelves: ShelvesResource;\n" in text
        assert "        const admin: AdminResource;\n" in text
        assert "        interface DebuggerResource {\n" in text
        assert "const debugger" not in text

    def test_method_signatures(self, library):
        text = self._generate(library)
        assert "): Request<ListShelvesResponse>;\n" in text
        assert "): Request<{}>;\n" in text
        assert "                /** Data format for response. */\n                alt?: string;\n" in text
        assert "                /** The name of the shelf. */\n                name: string;\n" in text

    def test_balanced_output(self, library):
        text = self._generate(library)
        assert text.count("{") == text.count("}")
        assert text.endswith("}\n")
