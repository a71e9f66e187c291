import io

import pytest
from rich.console import Console

from reverse_commands import cli
from reverse_commands.errors import (
    EXIT_CONFIRMATION,
    EXIT_FILE_ERROR,
    EXIT_NO_CANDIDATES,
    EXIT_OK,
    EXIT_USAGE,
)
from reverse_commands.render import MARKER_START


@pytest.fixture
def consoles():
    out = Console(file=io.StringIO(), width=200, color_system=None)
    err = Console(file=io.StringIO(), width=200, color_system=None)
    return out, err


@pytest.fixture
def rc(tmp_path):
    path = tmp_path / "home" / ".bashrc"
    path.write_text("export A=1\n")
    return path


def _run(argv, consoles, resolver):
    out, err = consoles
    code = cli.run(argv, console=out, err_console=err, resolver=resolver)
    return code, out.file.getvalue(), err.file.getvalue()


def test_dry_run_prints_plan_and_leaves_file(make_bin, rc, consoles, fake_resolver):
    d = make_bin("bin", executables=["cat", "ls", "sl", "sudo"])
    before = rc.read_text()

    code, out, _ = _run(
        ["install", "--dry-run", f"--path-filter={d}", f"--rc-file={rc}"],
        consoles,
        fake_resolver({"cat", "ls", "sl", "sudo"}),
    )

    assert code == EXIT_OK
    assert "DRY RUN" in out
    assert "tac" in out
    assert "sensitive" in out
    assert "collision" in out
    assert rc.read_text() == before


def test_install_then_uninstall(make_bin, rc, consoles, fake_resolver):
    d = make_bin("bin", executables=["cat", "grep"])
    before = rc.read_text()
    resolver = fake_resolver({"cat", "grep"})

    code, out, _ = _run(["install", "--path-filter", str(d), "--rc-file", str(rc)], consoles, resolver)
    assert code == EXIT_OK
    assert "Installed" in out
    text = rc.read_text()
    assert "tac() { command cat" in text
    assert 'dc() { builtin cd "$@"; }' in text

    code, out, _ = _run(["install", "--path-filter", str(d), "--rc-file", str(rc)], consoles, resolver)
    assert code == EXIT_OK
    assert "Replaced" in out
    assert rc.read_text().count(MARKER_START) == 1

    code, out, _ = _run(["uninstall", "--rc-file", str(rc)], consoles, resolver)
    assert code == EXIT_OK
    assert "Removed" in out
    assert rc.read_text() == before


def test_uninstall_nothing_to_do(rc, consoles, fake_resolver):
    code, out, _ = _run(["uninstall", "--rc-file", str(rc)], consoles, fake_resolver())

    assert code == EXIT_OK
    assert "Nothing to do" in out


def test_uninstall_dry_run_does_not_write(make_bin, rc, consoles, fake_resolver):
    d = make_bin("bin", executables=["cat"])
    _run(["install", "--path-filter", str(d), "--rc-file", str(rc)], consoles, fake_resolver())
    installed = rc.read_text()

    code, out, _ = _run(["uninstall", "--dry-run", "--rc-file", str(rc)], consoles, fake_resolver())

    assert code == EXIT_OK
    assert "would remove" in out
    assert rc.read_text() == installed


def test_force_without_token_is_fatal_and_writes_nothing(make_bin, rc, consoles, fake_resolver):
    d = make_bin("bin", executables=["sudo"])
    before = rc.read_text()

    code, _, err = _run(
        ["install", "--force-sensitive", "--path-filter", str(d), "--rc-file", str(rc)],
        consoles,
        fake_resolver(),
    )

    assert code == EXIT_CONFIRMATION
    assert "I_ACCEPT_RISK" in err
    assert rc.read_text() == before


def test_force_with_token_wraps_sensitive(make_bin, rc, consoles, fake_resolver):
    d = make_bin("bin", executables=["sudo"])

    code, out, _ = _run(
        [
            "install",
            "--force-sensitive",
            "--confirm=I_ACCEPT_RISK",
            "--path-filter",
            str(d),
            "--rc-file",
            str(rc),
        ],
        consoles,
        fake_resolver(),
    )

    assert code == EXIT_OK
    assert "WARNING" in out
    assert "odus() { command sudo" in rc.read_text()


def test_no_candidates(tmp_path, rc, consoles, fake_resolver, monkeypatch):
    monkeypatch.setenv("REVCMD_BUILTINS", "")

    code, _, err = _run(
        ["install", "--path-filter", str(tmp_path / "empty"), "--rc-file", str(rc)],
        consoles,
        fake_resolver(),
    )

    assert code == EXIT_NO_CANDIDATES
    assert "No candidate executables" in err


def test_nothing_left_after_filtering(make_bin, rc, consoles, fake_resolver, monkeypatch):
    d = make_bin("bin", executables=["ls", "sl", "a"])
    monkeypatch.setenv("REVCMD_BUILTINS", "")
    before = rc.read_text()

    code, out, _ = _run(
        ["install", "--path-filter", str(d), "--rc-file", str(rc)],
        consoles,
        fake_resolver({"ls", "sl"}),
    )

    assert code == EXIT_OK
    assert "Scanned 3 candidate commands" in out
    assert "No safe candidates" in out
    assert "3 total; single_char: 1, collision: 2" in out
    assert rc.read_text() == before


def test_unwritable_target(make_bin, tmp_path, consoles, fake_resolver):
    d = make_bin("bin", executables=["cat"])
    target = tmp_path / "rc_is_a_dir"
    target.mkdir()

    code, _, err = _run(["install", "--path-filter", str(d), "--rc-file", str(target)], consoles, fake_resolver())

    assert code == EXIT_FILE_ERROR
    assert "Error" in err


def test_settings_from_environment(make_bin, rc, consoles, fake_resolver, monkeypatch):
    d = make_bin("bin", executables=["cat"])
    monkeypatch.setenv("REVCMD_RC_FILE", str(rc))
    monkeypatch.setenv("REVCMD_PATH", str(d))

    code, _, _ = _run(["install"], consoles, fake_resolver())

    assert code == EXIT_OK
    assert "tac()" in rc.read_text()


@pytest.mark.parametrize("argv", [[], ["reinstall"], ["install", "--bogus"]])
def test_usage_errors(argv, consoles, fake_resolver):
    with pytest.raises(SystemExit) as excinfo:
        _run(argv, consoles, fake_resolver())
    assert excinfo.value.code == EXIT_USAGE


def test_main_exits_with_run_code(monkeypatch):
    monkeypatch.setattr(cli, "run", lambda argv=None: 3)
    with pytest.raises(SystemExit) as excinfo:
        cli.main([])
    assert excinfo.value.code == 3
