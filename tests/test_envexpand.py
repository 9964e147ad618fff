import pytest

from mixconf.envexpand import check_defined, expand, referenced_variables
from mixconf.exceptions import UndefinedVariableError


class TestEnvExpand:
    def test_referenced_variables(self):
        assert referenced_variables("$A/${B}/c") == ["A", "B"]
        assert referenced_variables("/plain/path") == []

    def test_check_defined_names_first_missing(self):
        env = {"A": "1"}
        with pytest.raises(UndefinedVariableError) as exc:
            check_defined(["$A", "${B}/x", "$C"], env)
        assert exc.value.variable == "B"

    def test_check_defined_passes(self):
        check_defined(["$A", "no vars"], {"A": ""})

    def test_expand(self):
        env = {"HOME": "/home/clr", "MIX": "demo"}
        assert expand("$HOME/${MIX}/update", env) == "/home/clr/demo/update"
        assert expand("<URL where the content will be hosted>", env) == "<URL where the content will be hosted>"

    def test_expand_uses_process_environment(self, monkeypatch):
        monkeypatch.setenv("MIXCONF_TEST_ROOT", "/srv")
        assert expand("$MIXCONF_TEST_ROOT/mix") == "/srv/mix"
