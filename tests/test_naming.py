import pytest

from discovery_typings.errors import MalformedDocumentError
from discovery_typings.naming import (
    check_exists,
    format_property_name,
    format_revision,
    get_package_name,
    get_resource_type_name,
    get_revision,
    parse_revision,
    parse_version,
)
from discovery_typings.parser.base import RestDescription


class TestCheckExists:
    def test_returns_value(self):
        assert check_exists("x") == "x"
        assert check_exists(0) == 0
        assert check_exists("") == ""

    def test_none_is_malformed(self):
        with pytest.raises(MalformedDocumentError, match="Expected value to be defined"):
            check_exists(None)


class TestParseVersion:
    @pytest.mark.parametrize("version,expected", [
        ("v1", "1.0"),
        ("v3", "3.0"),
        ("v1.2", "1.2"),
        ("v1beta1", "1.0"),
        ("v2.1alpha", "2.1"),
        ("alpha", "0.0"),
        ("directory_v1", "0.0"),
    ])
    def test_versions(self, version, expected):
        assert parse_version(version) == expected


class TestNames:
    @pytest.mark.parametrize("name,expected", [
        ("files", "FilesResource"),
        ("projects", "ProjectsResource"),
        ("userSettings", "UserSettingsResource"),
        ("access-policies", "AccessPoliciesResource"),
        ("content_categories", "ContentCategoriesResource"),
    ])
    def test_resource_type_name(self, name, expected):
        assert get_resource_type_name(name) == expected

    def test_package_name(self):
        description = RestDescription(name="drive", version="v3")
        assert get_package_name(description) == "gapi.client.drive-v3"

    def test_package_name_requires_version(self):
        with pytest.raises(MalformedDocumentError):
            get_package_name(RestDescription(name="drive"))

    @pytest.mark.parametrize("name,expected", [
        ("name", "name"),
        ("$.xgafv", '"$.xgafv"'),
        ("upload-type", '"upload-type"'),
        ("@type", '"@type"'),
        ("[key: string]", "[key: string]"),
    ])
    def test_format_property_name(self, name, expected):
        assert format_property_name(name) == expected


class TestRevision:
    def test_format(self):
        assert format_revision("20240101") == "// Revision: 20240101"

    def test_parse(self):
        assert parse_revision("// Revision: 20240101") == 20240101
        assert parse_revision("// Revision: 20240101  ") == 20240101
        assert parse_revision("// Revision: soon") is None
        assert parse_revision("// Generated from: x") is None

    def test_get_revision(self, tmp_path):
        path = tmp_path / "index.d.ts"
        path.write_text("// IMPORTANT\n// Revision: 20230505\n\ndeclare namespace gapi.client {}\n")
        assert get_revision(path) == 20230505

    def test_get_revision_missing(self, tmp_path):
        path = tmp_path / "index.d.ts"
        path.write_text("declare namespace gapi.client {}\n")
        assert get_revision(path) is None
