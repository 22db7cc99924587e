import unittest

from server.commands import ClientCommand, CommandParseError, parse_client_command


class ParseClientCommandTests(unittest.TestCase):
    def test_parses_simple_commands(self) -> None:
        for command_type in ("confirm_break", "toggle_pause", "reset", "stats"):
            with self.subTest(command_type=command_type):
                command = parse_client_command(f'{{"type": "{command_type}"}}')
                self.assertEqual(ClientCommand(type=command_type), command)

    def test_parses_manual_break_with_kind(self) -> None:
        command = parse_client_command('{"type": "manual_break", "kind": "long"}')

        self.assertEqual("manual_break", command.type)
        self.assertEqual("long", command.kind)

    def test_accepts_utf8_bytes(self) -> None:
        command = parse_client_command(b'{"type": "toggle_pause"}')

        self.assertEqual("toggle_pause", command.type)

    def test_rejects_invalid_payloads(self) -> None:
        cases = (
            "not json",
            "[1, 2]",
            '{"kind": "micro"}',
            '{"type": "snooze"}',
            '{"type": "manual_break"}',
            '{"type": "manual_break", "kind": "lunch"}',
            b"\xff\xfe",
        )
        for raw in cases:
            with self.subTest(raw=raw):
                with self.assertRaises(CommandParseError):
                    parse_client_command(raw)

    def test_parse_error_is_value_error(self) -> None:
        with self.assertRaises(ValueError):
            parse_client_command("{}")


if __name__ == "__main__":
    unittest.main()
