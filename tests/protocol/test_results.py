import pytest

from centapi.protocol.base import Reply, ReplyError
from centapi.protocol.history import HistoryResult
from centapi.protocol.presence import PresenceResult
from centapi.protocol.publication import BroadcastResult, PublishResult
from centapi.protocol.server import ChannelsResult, InfoResult
from centapi.shared.errors import DecodeError
from centapi.shared.message_parser import MessageParser


class TestDecodeResult:
    def setup_method(self):
        self.parser = MessageParser()

    def test_decodes_publish_result(self):
        raw = '{"epoch": "1789378957", "offset": 42}'

        result = self.parser.decode_result(PublishResult, raw)

        assert result.offset == 42
        assert result.epoch == "1789378957"

    def test_empty_input_raises(self):
        with pytest.raises(DecodeError):
            self.parser.decode_result(PublishResult, b"")

    def test_malformed_json_raises(self):
        with pytest.raises(DecodeError):
            self.parser.decode_result(PublishResult, b'{"channel": "test_channel", "offset": 42')

    def test_wrong_shape_raises(self):
        with pytest.raises(DecodeError):
            self.parser.decode_result(PublishResult, b'{"offset": "forty-two"}')

    def test_null_document_raises(self):
        with pytest.raises(DecodeError):
            self.parser.decode_result(PublishResult, "null")

    def test_validate_result_treats_none_as_empty(self):
        result = self.parser.validate_result(ChannelsResult, None)

        assert result.channels == {}

    def test_unknown_fields_are_tolerated(self):
        result = self.parser.decode_result(PublishResult, b'{"offset": 1, "shard": 3}')
        assert result.offset == 1

    def test_decodes_broadcast_responses(self):
        raw = """
        {
            "responses": [
                {"result": {"offset": 1, "epoch": "a"}},
                {"error": {"code": 102, "message": "unknown channel"}}
            ]
        }"""

        result = self.parser.decode_result(BroadcastResult, raw)

        assert len(result.responses) == 2
        assert result.responses[0].result.offset == 1
        assert result.responses[0].error is None
        assert result.responses[1].error == ReplyError(code=102, message="unknown channel")

    def test_decodes_history_publications(self):
        raw = """
        {
            "publications": [
                {"offset": 1, "data": {"input": "a"}},
                {"offset": 2, "data": {"input": "b"}, "info": {"user": "42", "client": "c1"}}
            ],
            "offset": 2,
            "epoch": "xyz"
        }"""

        result = self.parser.decode_result(HistoryResult, raw)

        assert [p.data for p in result.publications] == [{"input": "a"}, {"input": "b"}]
        assert result.publications[1].info.user == "42"
        assert result.epoch == "xyz"

    def test_decodes_presence_and_channels_and_info(self):
        presence = self.parser.decode_result(
            PresenceResult, '{"presence": {"c1": {"user": "42", "client": "c1"}}}'
        )
        channels = self.parser.decode_result(
            ChannelsResult, '{"channels": {"news": {"num_clients": 3}}}'
        )
        info = self.parser.decode_result(
            InfoResult, '{"nodes": [{"uid": "n1", "name": "node", "num_clients": 5}]}'
        )

        assert presence.presence["c1"].user == "42"
        assert channels.channels["news"].num_clients == 3
        assert info.nodes[0].uid == "n1"
        assert info.nodes[0].num_clients == 5


class TestReply:
    def test_empty_result_is_ack(self):
        assert Reply(result={}).is_ack
        assert Reply(result=None).is_ack

    def test_result_with_payload_is_not_ack(self):
        reply = Reply(result={"offset": 1})

        assert reply.ok
        assert not reply.is_ack

    def test_error_reply_is_not_ok(self):
        reply = Reply(error=ReplyError(code=103, message="permission denied"))

        assert not reply.ok
        assert not reply.is_ack
        assert str(reply.error) == "permission denied: 103"
