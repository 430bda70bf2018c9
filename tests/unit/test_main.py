"""
Unit tests for command line parsing.
"""

from main import parse_args


class TestParseArgs:
    """Tests for parse_args."""

    def test_defaults(self):
        args = parse_args([])
        assert not args.debug
        assert args.config is None
        assert not args.reset_settings

    def test_options(self):
        args = parse_args(["--debug", "--config", "alt.json", "--reset-settings"])
        assert args.debug
        assert args.config == "alt.json"
        assert args.reset_settings
