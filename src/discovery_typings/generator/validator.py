"""Validates rendered files for structural correctness before they are published."""

import json

from discovery_typings.naming import parse_revision

BRACKETS = {"}": "{", ")": "(", "]": "["}
REVISION_FILES = ("index.d.ts", "tests.ts")


def check_balanced(source: str) -> str | None:
    """Check that brackets balance outside of strings and comments.

    Returns an error message, or None when the source is balanced.
    """
    stack: list[tuple[str, int]] = []
    line = 1
    i = 0
    n = len(source)
    while i < n:
        char = source[i]
        if char == "\n":
            line += 1
        elif source.startswith("//", i):
            end = source.find("\n", i)
            i = n if end == -1 else end
            continue
        elif source.startswith("/*", i):
            end = source.find("*/", i + 2)
            if end == -1:
                return f"Unterminated comment (line {line})"
            line += source.count("\n", i, end)
            i = end + 2
            continue
        elif char in "'\"`":
            j = i + 1
            while j < n and source[j] != char:
                if source[j] == "\\":
                    j += 1
                elif source[j] == "\n" and char != "`":
                    return f"Unterminated string (line {line})"
                j += 1
            if j >= n:
                return f"Unterminated string (line {line})"
            line += source.count("\n", i, j)
            i = j + 1
            continue
        elif char in "{([":
            stack.append((char, line))
        elif char in BRACKETS:
            if not stack or stack[-1][0] != BRACKETS[char]:
                return f"Unbalanced '{char}' (line {line})"
            stack.pop()
        i += 1

    if stack:
        char, opened = stack[-1]
        return f"Unclosed '{char}' (line {opened})"
    return None


def validate_typescript(files: dict[str, str]) -> dict[str, str]:
    """Check TypeScript files for unbalanced brackets.

    Returns dict of {filename: error_message} for files with errors.
    """
    errors = {}
    for filename, content in files.items():
        if not filename.endswith(".ts"):
            continue
        error = check_balanced(content)
        if error:
            errors[filename] = f"SyntaxError: {error}"
    return errors


def validate_json(files: dict[str, str]) -> dict[str, str]:
    """Check JSON files for format errors.

    Returns dict of {filename: error_message} for files with errors.
    """
    errors = {}
    for filename, content in files.items():
        if not filename.endswith(".json"):
            continue
        try:
            json.loads(content)
        except json.JSONDecodeError as e:
            errors[filename] = f"JSONDecodeError: {e}"
    return errors


def validate_revision(files: dict[str, str]) -> dict[str, str]:
    """Check that declaration and test files carry a revision marker."""
    errors = {}
    for filename in REVISION_FILES:
        if filename not in files:
            continue
        if not any(parse_revision(line) is not None for line in files[filename].splitlines()):
            errors[filename] = "Missing revision marker"
    return errors


def validate_files(files: dict[str, str]) -> dict[str, str]:
    """Run all validations on rendered files.

    Returns dict of {filename: error_message} for all files with errors.
    """
    errors = {}
    errors.update(validate_typescript(files))
    errors.update(validate_json(files))
    errors.update(validate_revision(files))
    return errors
