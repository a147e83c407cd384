import json

import pytest

from expocrm.services.ai_service import clean_and_parse_json, split_data_url
from expocrm.services.research_service import clean_talking_points, format_talking_points


class TestCleanAndParseJson:

    def test_plain_object(self):
        assert clean_and_parse_json('{"a": 1}') == {"a": 1}

    def test_markdown_fence_and_prose(self):
        text = 'Here you go:\n```json\n{"status": "contacted", "urgency": "high"}\n```\nThanks'
        assert clean_and_parse_json(text) == {"status": "contacted", "urgency": "high"}

    def test_array_before_object(self):
        assert clean_and_parse_json('points: ["a", {"b": 2}]') == ["a", {"b": 2}]

    def test_trailing_commas(self):
        assert clean_and_parse_json('{"a": [1, 2,], "b": 3,}') == {"a": [1, 2], "b": 3}

    def test_unquoted_keys(self):
        assert clean_and_parse_json('{name: "Acme", size: "50"}') == {"name": "Acme", "size": "50"}

    def test_garbage_raises(self):
        with pytest.raises(json.JSONDecodeError):
            clean_and_parse_json("no json here")


class TestSplitDataUrl:

    def test_data_url(self):
        assert split_data_url("data:image/png;base64,AAAA", "image/jpeg") == ("image/png", "AAAA")

    def test_raw_base64(self):
        assert split_data_url("AAAA", "audio/webm") == ("audio/webm", "AAAA")


class TestTalkingPoints:

    def test_drops_artifacts(self):
        points = ["```json", "[", "json", "ok", '"Ask about their Q3 launch"', "- Mention our booth demo", "]"]
        assert clean_talking_points(points) == ["Ask about their Q3 launch", "Mention our booth demo"]

    def test_format_as_dash_lines(self):
        assert format_talking_points(["• First point", "Second point"]) == "- First point\n- Second point"
