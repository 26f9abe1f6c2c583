import io
import os

import pytest

from minishell.builtins import (
    ShellExit,
    cd,
    echo,
    env,
    exit_shell,
    export,
    is_builtin,
    pwd,
    run_builtin,
    unset,
)
from minishell.environment import Environment
from minishell.state import ShellState


@pytest.fixture
def state():
    return ShellState(
        env=Environment(["HOME=/nowhere", "USER=tester"]),
        stdout=io.StringIO(),
        stderr=io.StringIO(),
    )


def out(state):
    return state.stdout.getvalue()


def err(state):
    return state.stderr.getvalue()


def test_is_builtin():
    assert all(is_builtin(name) for name in ["echo", "cd", "pwd", "export", "unset", "env", "exit"])
    assert not is_builtin("ls")
    assert not is_builtin("ech")


def test_echo_joins_words(state):
    assert echo(["echo", "a", "b"], state) == 0
    assert out(state) == "a b\n"


def test_echo_no_newline(state):
    echo(["echo", "-n", "hello"], state)
    assert out(state) == "hello"


def test_echo_without_arguments(state):
    echo(["echo"], state)
    assert out(state) == "\n"


def test_echo_writes_to_redirect(state):
    target = io.StringIO()
    state.output_redirect = target
    echo(["echo", "x"], state)
    assert target.getvalue() == "x\n"
    assert out(state) == ""


def test_cd_too_many(state):
    assert cd(["cd", "a", "b"], state) == 1
    assert err(state) == "minishell: cd: too many arguments\n"


def test_cd_changes_directory_and_pwd(state, tmp_path, monkeypatch):
    monkeypatch.chdir(os.getcwd())
    state.env.set("PWD", "/old")
    assert cd(["cd", str(tmp_path)], state) == 0
    assert os.getcwd() == state.env.get("PWD")
    assert os.path.samefile(os.getcwd(), tmp_path)
    assert state.env.get("OLDPWD") == "/old"


def test_cd_home_not_set(state):
    state.env.unset("HOME")
    assert cd(["cd"], state) == 1
    assert err(state) == "minishell: cd: HOME not set\n"


def test_cd_home(state, tmp_path, monkeypatch):
    monkeypatch.chdir(os.getcwd())
    state.env.set("HOME", str(tmp_path))
    assert cd(["cd"], state) == 0
    assert os.path.samefile(os.getcwd(), tmp_path)


def test_cd_dash_without_oldpwd(state):
    assert cd(["cd", "-"], state) == 1
    assert err(state) == "minishell: cd: OLDPWD not set\n"


def test_cd_dash_returns(state, tmp_path, monkeypatch):
    monkeypatch.chdir(os.getcwd())
    state.env.set("OLDPWD", str(tmp_path))
    assert cd(["cd", "-"], state) == 0
    assert os.path.samefile(os.getcwd(), tmp_path)


def test_cd_missing_directory(state, tmp_path):
    before = os.getcwd()
    assert cd(["cd", str(tmp_path / "absent")], state) == 1
    assert err(state).startswith("minishell: cd: ")
    assert os.getcwd() == before


def test_pwd(state):
    assert pwd(["pwd"], state) == 0
    assert out(state) == os.getcwd() + "\n"


def test_pwd_too_many(state):
    assert pwd(["pwd", "x"], state) == 1
    assert err(state) == "minishell: pwd: too many arguments\n"


def test_export_sets_and_updates(state):
    assert export(["export", "NEW=value", "USER=other"], state) == 0
    assert state.env.get("NEW") == "value"
    assert state.env.get("USER") == "other"


def test_export_ignores_without_equals(state):
    before = state.env.as_list()
    assert export(["export", "PLAIN"], state) == 0
    assert state.env.as_list() == before


def test_export_value_keeps_later_equals(state):
    export(["export", "K=a=b"], state)
    assert state.env.get("K") == "a=b"


def test_export_invalid_stops(state):
    assert export(["export", "1a=b", "C=d"], state) == 1
    assert err(state) == "minishell: export: '1a=b': not a valid identifier\n"
    assert "C" not in state.env


def test_export_empty_name(state):
    assert export(["export", "=x"], state) == 1
    assert "not a valid identifier" in err(state)


def test_unset(state):
    assert unset(["unset", "USER", "ABSENT"], state) == 0
    assert "USER" not in state.env
    assert state.env.get("HOME") == "/nowhere"


def test_env_lists_entries(state):
    assert env(["env"], state) == 0
    assert out(state) == "HOME=/nowhere\nUSER=tester\n"


def test_env_too_many(state):
    assert env(["env", "x"], state) == 1
    assert err(state) == "minishell: env: too many arguments\n"


def test_exit_with_status(state):
    with pytest.raises(ShellExit) as info:
        exit_shell(["exit", "42"], state)
    assert info.value.status == 42
    assert out(state) == "exit\n"


def test_exit_default(state):
    with pytest.raises(ShellExit) as info:
        exit_shell(["exit"], state)
    assert info.value.status == 0


def test_exit_out_of_range(state):
    with pytest.raises(ShellExit) as info:
        exit_shell(["exit", "300"], state)
    assert info.value.status == 0


def test_exit_non_numeric(state):
    with pytest.raises(ShellExit) as info:
        exit_shell(["exit", "abc"], state)
    assert info.value.status == 0
    assert err(state) == "minishell: exit: abc: numeric argument required\n"


def test_exit_too_many(state):
    assert exit_shell(["exit", "1", "2"], state) == 1
    assert err(state) == "minishell: exit: too many arguments\n"


def test_run_builtin_records_status(state):
    assert run_builtin(["env", "x"], state) == 1
    assert state.last_status == 1
    assert run_builtin(["echo", "hi"], state) == 0
    assert state.last_status == 0


def test_run_builtin_rejects_other_commands(state):
    with pytest.raises(ValueError):
        run_builtin(["ls"], state)