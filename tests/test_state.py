import logging

import pytest

from mixconf.config import load_config
from mixconf.exceptions import ParseError
from mixconf.format_resolver import FormatResolver
from mixconf.state import CURRENT_STATE_VERSION, MixState, load_state


class TestStateDefaults:
    def test_load_defaults(self, resolver, system_format_file):
        state = MixState(resolver)
        state.load_defaults()

        assert state.offline is False
        assert state.mix.offline == "false"
        assert state.format == "29"
        assert state.format_source == str(system_format_file)
        assert state.get_filename() == "mixer.state"
        assert state.get_version() == CURRENT_STATE_VERSION


class TestStateLoad:
    def test_first_run_creates_file(self, workspace, resolver, caplog):
        path = workspace / "mixer.state"

        with caplog.at_level(logging.WARNING, logger="mixconf"):
            state = load_state(path, resolver=resolver)

        assert path.exists()
        text = path.read_text()
        assert text.startswith(f"#VERSION {CURRENT_STATE_VERSION}\n\n")
        assert "[Mix]" in text
        assert 'FORMAT = "29"' in text
        assert 'OFFLINE = "false"' in text
        assert state.format == "29"
        assert state.offline is False
        assert "Using FORMAT value from" in caplog.text

    def test_second_run_does_not_reresolve(self, workspace, resolver, system_format_file):
        path = workspace / "mixer.state"
        load_state(path, resolver=resolver)

        # Changing or removing the system default must not affect the saved state
        system_format_file.unlink()
        state = load_state(path, resolver=resolver)

        assert state.format == "29"
        assert state.offline is False
        assert state.format_source == str(path)

    def test_round_trip(self, workspace, resolver):
        path = workspace / "mixer.state"
        state = load_state(path, resolver=resolver)
        state.offline = True
        state.format = "31"
        state.save()

        loaded = load_state(path, resolver=resolver)
        assert loaded.offline is True
        assert loaded.format == "31"
        assert loaded.get_version() == CURRENT_STATE_VERSION

    def test_stale_version_is_bumped(self, workspace, resolver, caplog):
        path = workspace / "mixer.state"
        path.write_text('#VERSION 1.0\n\n[Mix]\nFORMAT = "5"\nOFFLINE = "true"\n')

        with caplog.at_level(logging.WARNING, logger="mixconf"):
            state = load_state(path, resolver=resolver)

        assert path.read_text().splitlines()[0] == f"#VERSION {CURRENT_STATE_VERSION}"
        assert state.format == "5"
        assert state.offline is True
        assert "Converting state to version" in caplog.text

    def test_missing_header_is_bumped(self, workspace, resolver):
        path = workspace / "mixer.state"
        path.write_text('[Mix]\nOFFLINE = "true"\n')

        state = load_state(path, resolver=resolver)

        assert state.get_version() == CURRENT_STATE_VERSION
        assert state.format == "29"
        assert path.read_text().splitlines()[0] == f"#VERSION {CURRENT_STATE_VERSION}"

    def test_unparseable_stale_body_keeps_defaults(self, workspace, resolver, caplog):
        path = workspace / "mixer.state"
        path.write_text("[Mix]\nFORMAT=3\nOFFLINE=false\n")

        with caplog.at_level(logging.WARNING, logger="mixconf"):
            state = load_state(path, resolver=resolver)

        assert state.get_version() == CURRENT_STATE_VERSION
        assert state.format == "29"
        assert state.offline is False
        assert path.read_text().startswith(f"#VERSION {CURRENT_STATE_VERSION}\n\n")
        assert 'FORMAT = "29"' in path.read_text()
        assert "Converting state to version" in caplog.text

    def test_binary_garbage_state_is_bumped(self, workspace, resolver):
        path = workspace / "mixer.state"
        path.write_bytes(b"\xff\xfe garbage\n")

        state = load_state(path, resolver=resolver)

        assert state.format == "29"
        assert path.read_text().splitlines()[0] == f"#VERSION {CURRENT_STATE_VERSION}"

    def test_non_utf8_current_state_is_parse_error(self, workspace, resolver):
        path = workspace / "mixer.state"
        path.write_bytes(f"#VERSION {CURRENT_STATE_VERSION}\n\n[Mix]\nFORMAT = \"".encode() + b"\xff\"\n")
        with pytest.raises(ParseError):
            load_state(path, resolver=resolver)

    def test_current_file_is_left_alone(self, workspace, resolver):
        path = workspace / "mixer.state"
        content = f'#VERSION {CURRENT_STATE_VERSION}\n\n[Mix]\nFORMAT = "7"\nOFFLINE = "false"\n'
        path.write_text(content)

        state = load_state(path, resolver=resolver)

        assert state.format == "7"
        assert path.read_text() == content

    def test_malformed_state_is_fatal(self, workspace, resolver):
        path = workspace / "mixer.state"
        path.write_text(f"#VERSION {CURRENT_STATE_VERSION}\n\n[Mix\n")
        with pytest.raises(ParseError):
            load_state(path, resolver=resolver)

    def test_unreadable_path_is_fatal(self, workspace, resolver):
        (workspace / "mixer.state").mkdir()
        with pytest.raises(OSError):
            load_state(workspace / "mixer.state", resolver=resolver)

    def test_default_filename_is_relative_to_cwd(self, workspace, resolver):
        state = MixState(resolver)
        state.load()
        assert (workspace / "mixer.state").exists()


class TestStateFromConfig:
    def test_converted_config_hands_over_format(self, legacy_config, workspace, no_system_format):
        config = load_config(legacy_config)
        assert 'FORMAT = "2"' in legacy_config.read_text()

        state = load_state(workspace / "mixer.state", config=config)
        assert state.format == "2"
        assert state.format_source == "builder.conf"

    def test_config_format_wins_over_system_file(self, workspace, system_format_file):
        (workspace / "builder.conf").write_text("[swupd]\nFORMAT=3\n")
        resolver = FormatResolver(system_path=system_format_file)

        state = load_state(workspace / "mixer.state", resolver=resolver)
        assert state.format == "3"

    def test_accessors(self, tmp_path):
        state = MixState(FormatResolver(system_path=tmp_path / "missing"))
        state.set_filename(tmp_path / "custom.state")
        state.set_version("0.1")
        assert state.get_filename() == str(tmp_path / "custom.state")
        assert state.get_version() == "0.1"
        assert state.get_latest_version() == CURRENT_STATE_VERSION
