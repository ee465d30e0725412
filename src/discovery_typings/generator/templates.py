"""Templates for the package metadata files that ship next to index.d.ts."""

import json
from collections.abc import Callable, Iterator

from pydantic import BaseModel

from discovery_typings.parser.base import RestDescription, RestMethod, RestResource
from discovery_typings.parser.discovery import method_in_namespace


class TemplateData(BaseModel):
    """Values available to every template."""

    description: RestDescription
    source: str
    namespaces: list[str]
    major_and_minor_version: str
    package_name: str
    npm_scope: str
    owners: list[str]
    max_line_length: int = 200


def _iter_methods(resources: dict[str, RestResource] | None, prefix: str = "") -> Iterator[tuple[str, RestMethod]]:
    """Yield (dotted resource path, method) for every method, depth-first."""
    for resource_name, resource in (resources or {}).items():
        path = f"{prefix}{resource_name}"
        for method_name, method in (resource.methods or {}).items():
            yield f"{path}.{method_name}", method
        yield from _iter_methods(resource.resources, f"{path}.")


def _render_readme(data: TemplateData) -> str:
    api = data.description
    namespace_lines = "\n".join(f"  // gapi.client.{ns}" for ns in data.namespaces)
    lines = [
        f"# TypeScript typings for {api.title} {api.version}",
        "",
    ]
    if api.description:
        lines.append(api.description)
    lines.extend([
        f"For detailed description please check [documentation]({api.documentation_link}).",
        "",
        "## Installing",
        "",
        f"Install typings for {api.title}:",
        "",
        "```",
        f"npm install @{data.npm_scope}/{data.package_name} --save-dev",
        "```",
        "",
        "## Usage",
        "",
        "You need to initialize Google API client in your code:",
        "",
        "```typescript",
        "gapi.load('client', () => {",
        "  // now we can use gapi.client",
        "  // ...",
        "});",
        "```",
        "",
        "Then load api client wrapper:",
        "",
        "```typescript",
        f"gapi.client.load('{data.source}', () => {{",
        "  // now we can use:",
        namespace_lines,
        "});",
        "```",
        "",
        "```typescript",
        "// Deprecated, use discovery document URL instead",
        f"gapi.client.load('{api.name}', '{api.version}', () => {{",
        "  // now we can use:",
        namespace_lines,
        "});",
        "```",
    ])

    if api.auth and api.auth.oauth2 and api.auth.oauth2.scopes:
        lines.extend([
            "",
            "Don't forget to authenticate your client before sending any request to resources:",
            "",
            "```typescript",
            "// declare client_id registered in Google Developers Console",
            "var client_id = '',",
            "  scope = [",
        ])
        for scope, value in api.auth.oauth2.scopes.items():
            lines.append(f"      // {value.description}")
            lines.append(f"      '{scope}',")
        lines.extend([
            "    ],",
            "    immediate = true;",
            "// ...",
            "",
            "gapi.auth.authorize(",
            "  { client_id: client_id, scope: scope, immediate: immediate },",
            "  authResult => {",
            "    if (authResult && !authResult.error) {",
            "        /* handle successful authorization */",
            "    } else {",
            "        /* handle authorization error */",
            "    }",
            "});",
            "```",
        ])

    usage = [
        (ns, path, method)
        for ns in data.namespaces
        for path, method in _iter_methods(api.resources)
        if method_in_namespace(method, ns)
    ]
    if usage:
        lines.extend(["", f"After that you can use {api.title} resources:", "", "```typescript"])
        for ns, path, method in usage:
            lines.append("")
            if method.description:
                lines.extend(["/*", method.description, "*/"])
            lines.append(f"await gapi.client.{ns}.{path}({{  }});")
        lines.append("```")

    return "\n".join(lines) + "\n"


def _render_tsconfig(data: TemplateData) -> str:
    config = {
        "compilerOptions": {
            "module": "commonjs",
            "lib": ["es6", "dom"],
            "noImplicitAny": True,
            "noImplicitThis": True,
            "strictNullChecks": True,
            "strictFunctionTypes": True,
            "baseUrl": "../",
            "typeRoots": ["../"],
            "types": [],
            "noEmit": True,
            "forceConsistentCasingInFileNames": True,
        },
        "files": ["index.d.ts", "tests.ts"],
    }
    return json.dumps(config, indent=2) + "\n"


def _render_tslint(data: TemplateData) -> str:
    config = {
        "extends": "dtslint/dtslint.json",
        "rules": {
            "max-line-length": [True, data.max_line_length],
            "no-redundant-jsdoc": False,
        },
    }
    return json.dumps(config, indent=2) + "\n"


def _render_package_json(data: TemplateData) -> str:
    api = data.description
    package = {
        "name": f"@{data.npm_scope}/{data.package_name}",
        "version": f"{data.major_and_minor_version}.{api.revision}",
        "description": f"TypeScript typings for {api.title} {api.version}",
        "license": "MIT",
        "author": data.owners[0],
        "types": "index.d.ts",
        "dependencies": {"@types/gapi.client": "*"},
    }
    return json.dumps(package, indent=2) + "\n"


def _render_npmrc(data: TemplateData) -> str:
    return "access=public\n"


TEMPLATES: dict[str, Callable[[TemplateData], str]] = {
    "readme.md": _render_readme,
    "tsconfig.json": _render_tsconfig,
    "tslint.json": _render_tslint,
    "package.json": _render_package_json,
    ".npmrc": _render_npmrc,
}


def render_template(name: str, data: TemplateData) -> str:
    """Render the named template; raises KeyError for unknown names."""
    return TEMPLATES[name](data)
