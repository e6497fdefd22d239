"""Wire codec: inbound frame parsing and outbound builders."""

from __future__ import annotations

import json

import pytest

from relay.protocol.rpc import (
    decode_frame, encode, event_frame, frame_args, resp_error, system_message, validate_frame,
)


class TestInbound:
    def test_decode_rejects_non_objects(self) -> None:
        with pytest.raises(ValueError):
            decode_frame("[1, 2]")
        with pytest.raises(ValueError):
            decode_frame("not json")

    def test_decode_rejects_deep_nesting_as_value_error(self) -> None:
        with pytest.raises(ValueError, match="nested too deeply"):
            decode_frame('{"type": ' + "[" * 100_000 + "]" * 100_000 + "}")

    @pytest.mark.parametrize(
        "frame, why",
        [
            ({"type": 5}, "type:not_string"),
            ({}, "type:not_string"),
            ({"type": "join-chat", "args": "alice"}, "args:not_list"),
            ({"type": "join-chat", "payload": []}, "payload:not_object"),
        ],
    )
    def test_validate_frame_reasons(self, frame, why) -> None:
        assert validate_frame(frame) == (False, why)

    def test_positional_args_trimmed_to_event_params(self) -> None:
        obj = {"type": "badge-update", "args": ["0xab", True, "extra", "junk"]}
        assert frame_args(obj) == ["0xab", True]

    def test_named_payload_mapped_in_order(self) -> None:
        obj = {"type": "send-message", "payload": {"chatType": "vip", "message": "gm", "username": "al"}}
        assert frame_args(obj) == ["gm", "al", None, "vip"]

    def test_named_payload_trailing_defaults_left_off(self) -> None:
        obj = {"type": "join-chat", "payload": {"username": "al"}}
        assert frame_args(obj) == ["al"]

    def test_unknown_event_has_no_args(self) -> None:
        assert frame_args({"type": "mystery", "args": [1, 2]}) == []


class TestOutbound:
    def test_event_frame_round_trips_unicode(self) -> None:
        raw = encode(event_frame("badge-update", "0xab", True))
        assert raw == '{"type":"badge-update","args":["0xab",true]}'
        assert json.loads(encode(event_frame("x", "\U0001F389")))["args"] == ["\U0001F389"]

    def test_error_frame(self) -> None:
        assert resp_error("BAD_JSON", "invalid_json") == {
            "type": "ERROR",
            "payload": {"code": "BAD_JSON", "detail": "invalid_json"},
        }

    def test_system_message_ids_unique(self) -> None:
        a = system_message("hi", "normal", "2025-01-01T00:00:00.000Z", 1735689600000)
        b = system_message("hi", "normal", "2025-01-01T00:00:00.000Z", 1735689600000)
        assert a["messageId"] != b["messageId"]
        assert a["messageId"].startswith("system-1735689600000-")
        assert a["id"] == "system"
        assert a["username"] == "System"
