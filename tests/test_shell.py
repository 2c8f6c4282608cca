# tests/test_shell.py
import io
import logging

import pytest
from rich.console import Console

from graceful.cli.commands.common import load_common_commands
from graceful.cli.loader import discover_commands
from graceful.cli.shell import build_manager, read_batch, run, run_loop
from graceful.cli.state import EditorState
from graceful.commands.manager import CommandManager
from graceful.config import Settings, load_settings
from graceful.logs import LOGGER_NAME, setup_logging


def list_reader(lines, prompts=None):
    pending = list(lines)

    def readline(prompt):
        if prompts is not None:
            prompts.append(prompt)
        if not pending:
            raise EOFError
        return pending.pop(0)
    return readline


@pytest.fixture
def restore_logging():
    logger = logging.getLogger(LOGGER_NAME)
    saved = (list(logger.handlers), logger.propagate, logger.level)
    yield logger
    for h in logger.handlers:
        if h not in saved[0]:
            h.close()
    logger.handlers[:] = saved[0]
    logger.propagate = saved[1]
    logger.setLevel(saved[2])


@pytest.fixture
def manager():
    m = CommandManager()
    discover_commands(m)
    return m


# ---- command bar input ----
def test_trailing_backslash_continues_the_batch():
    prompts = []
    text = read_batch(list_reader(["insert a\\", "insert b\\", "quit"], prompts), "> ")

    assert text == "insert a\ninsert b\nquit"
    assert prompts == ["> ", "... ", "... "]


def test_loop_runs_batches_until_quit(manager):
    state = EditorState()
    out = io.StringIO()

    run_loop(manager, state, list_reader(["insert hello", "bogus", "quit", "insert never"]), out)

    assert state.quit_requested
    assert state.panes[0].text == "hello"
    assert "[Command Error] bogus: Command 'bogus' not recognized." in out.getvalue()
    assert [e.text for e in manager.history] == ["insert hello", "bogus", "quit"]
    # the failure listener is removed when the loop ends
    assert manager.events.trigger("command_failed", "x", "y") == 0


def test_loop_stops_at_end_of_input(manager):
    state = EditorState()
    run_loop(manager, state, list_reader(["", "insert x"]), io.StringIO())

    assert not state.quit_requested
    assert len(manager.history) == 1


def test_loop_reports_circular_aliases_and_continues(manager):
    manager.alias_command("loop", "loop")
    state = EditorState()
    out = io.StringIO()

    run_loop(manager, state, list_reader(["loop", "insert ok"]), out)

    assert "[error] Circular alias reference: loop -> loop" in out.getvalue()
    assert state.panes[0].text == "ok"


def test_run_reads_from_a_stream(restore_logging):
    stdin = io.StringIO("insert one\\\ninsert two\nq\n")
    stdout = io.StringIO()

    state = run(stdin=stdin, stdout=stdout, settings=Settings(log_level="WARNING"))

    assert state.quit_requested
    assert state.panes[0].text == "one\ntwo"
    assert "(0:untitled) graceful> " in stdout.getvalue()


# ---- wiring ----
def test_build_manager_loads_builtins_and_extensions():
    m = build_manager(Settings())
    for name in ("help", "?", "history", "aliases", "insert", "i", "sb", "quit", "q", "exit", "save", "w"):
        assert name in m.registry


def test_loader_reports_registered_names():
    m = CommandManager()
    names = discover_commands(m, "graceful.extensions")
    assert {"split_h", "split_v", "sb", "focus", "jump", "quit"} <= set(names)
    assert m.registry.get("f").alias_target == "focus {0}"
    assert m.registry.get("q").alias_target == "quit"
    assert m.registry.get("quit").run_last


def test_help_history_and_aliases_output(manager):
    out = io.StringIO()
    load_common_commands(manager, Console(file=out, width=200))
    state = EditorState()

    run_loop(manager, state, list_reader(["insert x", "help", "history 5", "aliases"]), io.StringIO())

    text = out.getvalue()
    assert "insert" in text and "Append a line of text" in text
    assert "insert x" in text and "Succeeded" in text
    assert "split_v input {0} | split_h input {0}" in text


# ---- config and logging ----
def test_load_settings_from_mapping():
    settings = load_settings({
        "GRACEFUL_LOG_LEVEL": "debug",
        "GRACEFUL_HISTORY_LIMIT": "25",
        "GRACEFUL_EXTENSIONS": "graceful.extensions, my.plugins",
        "GRACEFUL_PROMPT": ">> ",
    })

    assert settings.log_level == "DEBUG"
    assert settings.history_limit == 25
    assert settings.extensions == ["graceful.extensions", "my.plugins"]
    assert settings.prompt == ">> "
    assert settings.log_file is None


def test_load_settings_defaults_and_bad_values():
    settings = load_settings({"GRACEFUL_HISTORY_LIMIT": "lots", "GRACEFUL_EXTENSIONS": " , "})
    assert settings == Settings()


def test_setup_logging_is_idempotent(restore_logging, tmp_path):
    log_file = tmp_path / "graceful.log"
    restore_logging.handlers[:] = []

    logger = setup_logging(Settings(log_level="DEBUG", log_file=str(log_file)))
    setup_logging(Settings(log_level="DEBUG", log_file=str(log_file)))

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2
    logging.getLogger("graceful.commands.sequencer").info("hello file")
    for h in logger.handlers:
        h.flush()
    assert "INFO - graceful.commands.sequencer - hello file" in log_file.read_text(encoding="utf-8")


def test_each_session_gets_its_own_manager():
    import graceful.commands as commands

    first = build_manager(Settings())
    second = build_manager(Settings())

    assert first is not second
    assert first.history is not second.history
    assert "manager" not in commands.__all__
