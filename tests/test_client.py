from unittest.mock import patch, MagicMock

import pytest
import requests

from discovery_typings.client import DEFAULT_DIRECTORY_URL, DiscoveryClient
from discovery_typings.parser.base import DirectoryItem, RestDescription

DIRECTORY = {
    "kind": "discovery#directoryList",
    "items": [
        {
            "id": "drive:v2",
            "name": "drive",
            "version": "v2",
            "discoveryRestUrl": "https://example.com/drive/v2/rest",
            "preferred": False,
        },
        {
            "id": "drive:v3",
            "name": "drive",
            "version": "v3",
            "discoveryRestUrl": "https://example.com/drive/v3/rest",
            "preferred": True,
        },
        {
            "id": "gmail:v1",
            "name": "gmail",
            "version": "v1",
            "discoveryRestUrl": "https://example.com/gmail/v1/rest",
            "preferred": True,
        },
    ],
}


def _response(data=None, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = data
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(response=response)
    return response


def _description(url: str) -> RestDescription:
    return RestDescription(id=url, name=url)


class TestDiscoveryClient:
    def test_proxy(self):
        client = DiscoveryClient(proxy="http://proxy:3128")
        assert client.session.proxies["https"] == "http://proxy:3128"

    def test_no_proxy(self):
        client = DiscoveryClient()
        assert "https" not in client.session.proxies

    def test_list_apis(self):
        client = DiscoveryClient()
        with patch.object(client.session, "get", return_value=_response(DIRECTORY)) as mock_get:
            items = client.list_apis()
        mock_get.assert_called_once_with(DEFAULT_DIRECTORY_URL, timeout=60)
        assert [item.id for item in items] == ["drive:v2", "drive:v3", "gmail:v1"]

    def test_list_preferred_apis(self):
        client = DiscoveryClient()
        with patch.object(client.session, "get", return_value=_response(DIRECTORY)):
            items = client.list_apis(preferred_only=True)
        assert [item.id for item in items] == ["drive:v3", "gmail:v1"]

    def test_get_rest_description_sorts_keys(self):
        client = DiscoveryClient()
        data = {"id": "x:v1", "schemas": {"B": {"id": "B", "type": "string"}, "A": {"id": "A", "type": "string"}}}
        with patch.object(client.session, "get", return_value=_response(data)):
            description = client.get_rest_description("https://example.com/x/v1/rest")
        assert list(description.schemas) == ["A", "B"]

    def test_http_error_propagates(self):
        client = DiscoveryClient()
        with patch.object(client.session, "get", return_value=_response(status_code=500)):
            with pytest.raises(requests.HTTPError):
                client.list_apis()


class TestExtraApis:
    def test_probes_until_not_found(self):
        client = DiscoveryClient()
        responses = [_response({"id": "googleads:v4"}), _response({"id": "googleads:v5"}), _response(status_code=404)]
        with patch.object(client.session, "get", side_effect=responses) as mock_get:
            extras = list(client.extra_apis())
        assert [description.id for description, _ in extras] == ["googleads:v4", "googleads:v5"]
        assert extras[0][1] == "https://googleads.googleapis.com/$discovery/rest?version=v4"
        assert mock_get.call_count == 3

    def test_other_errors_propagate(self):
        client = DiscoveryClient()
        with patch.object(client.session, "get", return_value=_response(status_code=503)):
            with pytest.raises(requests.HTTPError):
                list(client.extra_apis())


class TestIterRestDescriptions:
    def _client(self):
        client = DiscoveryClient()
        client.list_apis = MagicMock(return_value=[DirectoryItem.model_validate(item) for item in DIRECTORY["items"]])
        client.get_rest_description = MagicMock(side_effect=_description)
        client.extra_apis = MagicMock(return_value=iter([(_description("ads"), "ads-url")]))
        return client

    def test_all_apis(self):
        client = self._client()
        sources = [source for _, source in client.iter_rest_descriptions()]
        assert sources == [
            "https://example.com/drive/v2/rest",
            "https://example.com/drive/v3/rest",
            "https://example.com/gmail/v1/rest",
            "ads-url",
        ]

    def test_single_service(self):
        client = self._client()
        sources = [source for _, source in client.iter_rest_descriptions("gmail")]
        assert sources == ["https://example.com/gmail/v1/rest"]
        client.extra_apis.assert_not_called()

    def test_google_ads_only(self):
        client = self._client()
        sources = [source for _, source in client.iter_rest_descriptions("googleads")]
        assert sources == ["ads-url"]

    def test_fetches_lazily(self):
        client = self._client()
        iterator = client.iter_rest_descriptions()
        next(iterator)
        assert client.get_rest_description.call_count == 1
