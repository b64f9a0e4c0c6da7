# ==============================================
# Tests for the CLI
# ==============================================

import json

import pytest

from elementstore import InMemoryStore
from elementstore.cli import load_class, main
from elementstore.voting import VotingCandidate


@pytest.fixture
def cli_env(fresh_config, tmp_path):
    fresh_config.setenv("ELEMENTSTORE_BACKEND", "memory")
    fresh_config.setenv("METADATA_DIR", str(tmp_path / "meta"))
    return tmp_path


@pytest.fixture
def shared_store(cli_env, fresh_config, monkeypatch):
    fresh_config.setenv("ELEMENTSTORE_BACKEND", "mongo")
    store = InMemoryStore()
    monkeypatch.setattr("elementstore.cli.create_store", lambda config: store)
    return store


class TestCli:
    def test_describe(self, cli_env, capsys):
        assert main(["describe", "elementstore.voting:VotingCandidate"]) == 0
        output = json.loads(capsys.readouterr().out)
        assert output["className"] == "VotingCandidate"
        assert not (cli_env / "meta" / "VotingCandidate.json").exists()

    def test_describe_and_save(self, cli_env, capsys):
        assert main(["describe", "elementstore.voting:VotingCandidate", "--save"]) == 0
        assert (cli_env / "meta" / "VotingCandidate.json").exists()

    def test_scaffold(self, cli_env, capsys):
        definition = cli_env / "car.json"
        definition.write_text(json.dumps({"className": "Car", "properties": ["color"], "methods": ["honk"]}))
        assert main(["scaffold", str(definition), "--name", "Truck"]) == 0
        output = capsys.readouterr().out
        assert output.startswith("class Truck:\n")
        assert "    def honk(self):\n" in output

    @pytest.mark.parametrize("argv", [["get", "doc"], ["set", "doc", '{"a": 1}']])
    def test_get_and_set_refuse_memory_backend(self, cli_env, capsys, argv):
        assert main(argv) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "persistent backend" in captured.err

    def test_set_then_get_share_the_store(self, shared_store, capsys):
        assert main(["set", "doc", '{"a": 1}']) == 0
        assert json.loads(capsys.readouterr().out) == {"a": 1}
        assert main(["set", "doc", '{"b": 2}']) == 0
        capsys.readouterr()
        assert main(["get", "doc"]) == 0
        assert json.loads(capsys.readouterr().out) == {"a": 1, "b": 2}
        assert shared_store.keys() == ["doc"]

    def test_set_rejects_non_object(self, shared_store, capsys):
        assert main(["set", "doc", "[1]"]) == 1
        assert "error:" in capsys.readouterr().err

    def test_bad_target(self, cli_env, capsys):
        assert main(["describe", "elementstore.voting"]) == 1
        assert main(["describe", "elementstore.voting:IDENTIFIER_PREFIX"]) == 1

    def test_invalid_description_file(self, cli_env, capsys):
        definition = cli_env / "bad.json"
        definition.write_text("{}")
        assert main(["scaffold", str(definition)]) == 1


def test_load_class():
    assert load_class("elementstore.voting:VotingCandidate") is VotingCandidate
