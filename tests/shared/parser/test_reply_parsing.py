import pytest

from centapi.protocol.base import EmptyResult
from centapi.protocol.presence import PresenceStatsCommand, PresenceStatsResult
from centapi.protocol.publication import PublishCommand
from centapi.protocol.subscriptions import SubscribeCommand
from centapi.shared.errors import DecodeError
from centapi.shared.message_parser import MessageParser


class TestPayloadValidation:
    def test_returns_true_for_valid_reply(self):
        parser = MessageParser()

        assert parser.is_valid_reply({"result": {}}) is True
        assert parser.is_valid_reply({"result": None}) is True
        assert parser.is_valid_reply({"error": {"code": 102, "message": "x"}}) is True

    def test_returns_false_for_invalid_reply(self):
        parser = MessageParser()

        # Neither result nor error
        assert parser.is_valid_reply({}) is False
        assert parser.is_valid_reply({"offset": 1}) is False

        # Not an object
        assert parser.is_valid_reply([{"result": {}}]) is False
        assert parser.is_valid_reply("ok") is False
        assert parser.is_valid_reply(None) is False


class TestReplyParsing:
    def setup_method(self):
        self.parser = MessageParser()

    def test_parses_bare_ack(self):
        reply = self.parser.parse_reply({"result": {}})

        assert reply.ok
        assert reply.is_ack

    def test_parses_success_payload(self):
        reply = self.parser.parse_reply({"result": {"offset": 7, "epoch": "e"}})

        assert reply.result == {"offset": 7, "epoch": "e"}
        assert reply.error is None

    def test_parses_error_reply(self):
        reply = self.parser.parse_reply(
            {"error": {"code": 102, "message": "unknown channel"}}
        )

        assert not reply.ok
        assert reply.error.code == 102
        assert reply.error.message == "unknown channel"

    def test_keeps_both_fields_when_server_sends_both(self):
        reply = self.parser.parse_reply(
            {"result": {}, "error": {"code": 100, "message": "internal error"}}
        )

        assert reply.result == {}
        assert reply.error.code == 100

    def test_array_payload_raises(self):
        with pytest.raises(DecodeError):
            self.parser.parse_reply([{"result": {}}])

    def test_object_without_result_or_error_raises(self):
        with pytest.raises(DecodeError):
            self.parser.parse_reply({})

    def test_malformed_error_raises(self):
        with pytest.raises(DecodeError):
            self.parser.parse_reply({"error": "boom"})

    def test_error_without_message_raises(self):
        with pytest.raises(DecodeError):
            self.parser.parse_reply({"error": {"code": 102}})


class TestRepliesParsing:
    def setup_method(self):
        self.parser = MessageParser()

    def test_parses_replies_in_order(self):
        payload = [
            {"result": {"offset": 1}},
            {"error": {"code": 102, "message": "unknown channel"}},
            {"result": {"offset": 3}},
        ]

        replies = self.parser.parse_replies(payload)

        assert [r.result for r in replies] == [{"offset": 1}, None, {"offset": 3}]
        assert replies[1].error.code == 102

    def test_empty_array_gives_no_replies(self):
        assert self.parser.parse_replies([]) == []

    def test_object_payload_raises(self):
        with pytest.raises(DecodeError):
            self.parser.parse_replies({"result": {}})

    def test_bad_element_raises_with_index(self):
        with pytest.raises(DecodeError) as exc_info:
            self.parser.parse_replies([{"result": {}}, {"unexpected": True}])

        assert "index 1" in str(exc_info.value)


class TestResultParsing:
    def setup_method(self):
        self.parser = MessageParser()

    def test_returns_typed_result_for_command(self):
        command = PresenceStatsCommand.create(channel="news")
        reply = self.parser.parse_reply({"result": {"num_clients": 3, "num_users": 2}})

        result = self.parser.parse_result(command, reply)

        assert isinstance(result, PresenceStatsResult)
        assert result.num_clients == 3
        assert result.num_users == 2

    def test_returns_empty_result_for_ack(self):
        command = SubscribeCommand.create(channel="news", user="42")

        result = self.parser.parse_result(command, self.parser.parse_reply({"result": None}))

        assert isinstance(result, EmptyResult)

    def test_type_mismatch_raises(self):
        command = PresenceStatsCommand.create(channel="news")
        reply = self.parser.parse_reply({"result": {"num_clients": "many"}})

        with pytest.raises(DecodeError) as exc_info:
            self.parser.parse_result(command, reply)

        assert "PresenceStatsResult" in str(exc_info.value)


class TestSerialization:
    def test_serializes_commands_in_order(self):
        parser = MessageParser()
        commands = [
            PublishCommand.create(channel=f"test_channel_{i}", data={"input": "test1"})
            for i in range(3)
        ]

        body = parser.serialize_commands(commands)

        assert body == [
            {
                "method": "publish",
                "params": {"channel": f"test_channel_{i}", "data": {"input": "test1"}},
            }
            for i in range(3)
        ]
