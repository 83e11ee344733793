import io

import pytest

from bonsaidb import cli
from bonsaidb.engine import DatabaseEngine


@pytest.fixture
def engine(tmp_path):
    with DatabaseEngine(tmp_path / "cli.db") as eng:
        yield eng


def run(engine, line):
    out, err = io.StringIO(), io.StringIO()
    keep_going = cli.handle_command(engine, cli.split_line(line, " "), out, err)
    return keep_going, out.getvalue(), err.getvalue()


def test_split_line_words():
    assert cli.split_line("insert 1 Juan 30 1500.75", " ") == [
        "insert", "1", "Juan", "30", "1500.75",
    ]


def test_split_line_empty_and_edges():
    assert cli.split_line("", " ") == []
    assert cli.split_line("a  b", " ") == ["a", "", "b"]
    assert cli.split_line("a b ", " ") == ["a", "b"]


def test_print_help_lists_commands():
    out = io.StringIO()
    cli.print_help(out)
    text = out.getvalue()
    for command in ("insert", "select", "delete", "dump", "help", "exit"):
        assert command in text


@pytest.mark.parametrize("command", ["exit", "quit"])
def test_exit_commands_stop(engine, command):
    keep_going, _, _ = run(engine, command)
    assert keep_going is False


def test_empty_tokens_continue(engine):
    assert cli.handle_command(engine, [], io.StringIO(), io.StringIO()) is True


def test_insert_then_select(engine):
    keep_going, _, err = run(engine, "insert 101 Juan 30 1500.75")
    assert keep_going is True
    assert err == ""
    _, out, _ = run(engine, "select 101")
    assert "Juan" in out
    assert "1500.75" in out
    assert engine.find(101).age == 30


def test_insert_wrong_argument_count(engine):
    _, _, err = run(engine, "insert 1 Juan 30")
    assert "insert" in err
    assert engine.dump_all() == []


def test_insert_invalid_id(engine):
    _, _, err = run(engine, "insert abc Juan 30 10.0")
    assert err.startswith("Error")
    assert engine.dump_all() == []


def test_insert_accepts_numeric_prefix(engine):
    run(engine, "insert 7x Ana 25y 3.5z")
    found = engine.find(7)
    assert found.age == 25
    assert found.balance == 3.5


def test_insert_out_of_range_id(engine):
    _, _, err = run(engine, "insert 99999999999 Ana 25 1.0")
    assert err.startswith("Error")
    assert engine.dump_all() == []


def test_insert_truncates_long_name(engine):
    run(engine, "insert 3 " + "a" * 80 + " 40 2.0")
    assert engine.find(3).name == "a" * 49


def test_select_missing(engine):
    _, out, _ = run(engine, "select 42")
    assert "42" in out
    assert engine.find(42) is None


def test_select_bad_id(engine):
    _, out, err = run(engine, "select nope")
    assert out == ""
    assert err.startswith("Error")


def test_delete_removes_from_index(engine):
    run(engine, "insert 5 Eva 22 9.0")
    _, out, err = run(engine, "delete 5")
    assert "5" in out
    assert err == ""
    assert engine.find(5) is None


def test_delete_missing_reports_error(engine):
    _, out, err = run(engine, "delete 8")
    assert out == ""
    assert "8" in err


def test_dump_lists_records(engine):
    run(engine, "insert 1 Ana 30 10.5")
    run(engine, "insert 2 Luis 41 100")
    _, out, _ = run(engine, "dump")
    assert out.splitlines() == ["1,Ana,30,10.5", "2,Luis,41,100"]


def test_unknown_command(engine):
    keep_going, _, err = run(engine, "frobnicate")
    assert keep_going is True
    assert "frobnicate" in err


def test_main_requires_one_argument(capsys):
    assert cli.main([]) == 1
    assert cli.main(["a.db", "b.db"]) == 1
    assert "Usage" in capsys.readouterr().err


def test_main_runs_script(tmp_path, monkeypatch, capsys):
    db = tmp_path / "main.db"
    monkeypatch.setattr("sys.stdin", io.StringIO("insert 9 Rosa 50 12.25\ndump\nexit\nselect 9\n"))
    assert cli.main([str(db)]) == 0
    out = capsys.readouterr().out
    assert "9,Rosa,50,12.25" in out
    assert "Record found" not in out
    with DatabaseEngine(db) as eng:
        assert eng.find(9).name == "Rosa"


def test_main_stops_at_end_of_input(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("insert 1 A 2 3.0"))
    assert cli.main([str(tmp_path / "eof.db")]) == 0
    out = capsys.readouterr().out
    assert out.count(cli.PROMPT) == 2