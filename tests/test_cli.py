import io
import json

import pytest

from valuegen import cli

from conftest import member, target


@pytest.fixture
def descriptor_file(tmp_path, foo_descriptor):
    path = tmp_path / "targets.json"
    path.write_text(json.dumps({"targets": [foo_descriptor]}))
    return path


def test_generate_writes_files(tmp_path, descriptor_file):
    out = tmp_path / "out"
    assert cli.main(["generate", str(descriptor_file), "-o", str(out)]) == 0
    code = (out / "com" / "example" / "FooBuilder.java").read_text()
    assert "public final class FooBuilder {" in code


def test_generate_python_options(tmp_path, descriptor_file):
    out = tmp_path / "out"
    argv = [
        "generate", str(descriptor_file), "-l", "py", "-o", str(out),
        "--no-comments", "--indent-size", "2", "--workers", "2", "--verbose",
    ]
    assert cli.main(argv) == 0
    code = (out / "foo_builder.py").read_text()
    assert not code.startswith("#")
    assert "\n  def __init__(self):\n" in code


def test_generate_prints_without_output_dir(descriptor_file, capsys):
    assert cli.main(["generate", str(descriptor_file)]) == 0
    assert "FooBuilder" in capsys.readouterr().out


def test_generate_from_stdin(tmp_path, monkeypatch, foo_descriptor):
    monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(foo_descriptor)))
    assert cli.main(["generate", "-", "-o", str(tmp_path)]) == 0
    assert (tmp_path / "com" / "example" / "FooBuilder.java").exists()


def test_failing_target_sets_exit_code(tmp_path):
    path = tmp_path / "targets.json"
    path.write_text(
        json.dumps([target("Good", member("id", "int")), target("Bad", member("id", "int"), kind="class")])
    )
    assert cli.main(["generate", str(path), "-o", str(tmp_path / "out")]) == 1
    assert (tmp_path / "out" / "com" / "example" / "GoodBuilder.java").exists()
    assert not (tmp_path / "out" / "com" / "example" / "BadBuilder.java").exists()


def test_known_types_restrict_resolution(tmp_path):
    path = tmp_path / "targets.json"
    path.write_text(json.dumps([target("Foo", member("other", "com.acme.Other"))]))
    assert cli.main(["generate", str(path), "--known-type", "com.acme.Thing"]) == 1
    assert cli.main(["generate", str(path), "--known-type", "com.acme.Other"]) == 0


@pytest.mark.parametrize(
    "argv",
    [
        ["generate", "absent.json"],
        ["generate", "-l", "cobol", "absent.json"],
        ["generate", "--indent-size", "0", "absent.json"],
        [],
    ],
)
def test_errors_exit_with_one(argv):
    assert cli.main(argv) == 1


def test_bad_config_file(tmp_path, descriptor_file):
    config = tmp_path / "config.json"
    config.write_text("[]")
    assert cli.main(["generate", str(descriptor_file), "--config", str(config)]) == 1


def test_languages_and_info(capsys):
    assert cli.main(["languages"]) == 0
    assert "python" in capsys.readouterr().out
    assert cli.main(["info", "jav"]) == 0
    assert "javax.annotation.Generated" in capsys.readouterr().out
    assert cli.main(["info", "cobol"]) == 1
