"""
End-to-end tests: source text in, output and diagnostics out
"""

import pytest
from error_handling import DiagnosticKind
from pipeline import (
  EXIT_OK, EXIT_RUNTIME_ERROR, EXIT_STATIC_ERROR, create_session, run,
)


class TestFileMode:
  """A whole program run once"""

  def test_print_sum(self, session, out):
    result = session.run("print 1 + 2;")
    assert out.getvalue() == "3\n"
    assert result.interpreted
    assert result.diagnostics == []
    assert session.exit_status() == EXIT_OK

  def test_program_output_in_order(self, session, out):
    session.run('print "a" + "b";\nprint 2 * 3 - 1;\nprint !nil;\n')
    assert out.getvalue() == "ab\n5\ntrue\n"

  def test_large_and_small_numbers_print_in_decimal(self, session, out):
    session.run("print 10000000000000000;\nprint 0.00001;")
    assert out.getvalue() == "10000000000000000\n0.00001\n"

  def test_parse_error_suppresses_interpretation(self, session, out, err):
    result = session.run("print 1;\nprint 2\nprint 3;")
    assert out.getvalue() == ""
    assert not result.interpreted
    # The statements around the bad one still parsed
    assert len(result.statements) == 2
    assert err.getvalue() == "[line 3] Error at 'print': Expect ';' after value.\n"
    assert session.exit_status() == EXIT_STATIC_ERROR

  def test_scan_error_suppresses_interpretation(self, session, out):
    result = session.run("print 1; @")
    assert out.getvalue() == ""
    assert result.diagnostics[0].kind == DiagnosticKind.SCAN
    assert session.exit_status() == EXIT_STATIC_ERROR

  def test_runtime_error_exit_status(self, session, out):
    session.run("print 1; -true; print 2;")
    assert out.getvalue() == "1\n"
    assert session.exit_status() == EXIT_RUNTIME_ERROR

  def test_run_file(self, session, out, tmp_path):
    script = tmp_path / "script.lox"
    script.write_text("// sum\nprint 40 + 2;\n", encoding="utf-8")
    assert session.run_file(str(script)) == EXIT_OK
    assert out.getvalue() == "42\n"

  def test_run_file_missing(self, session, tmp_path):
    with pytest.raises(FileNotFoundError):
      session.run_file(str(tmp_path / "missing.lox"))

  def test_context_names_the_file(self, out, err, tmp_path):
    script = tmp_path / "bad.lox"
    script.write_text("print 1 +;\n", encoding="utf-8")
    session = create_session(out=out, err=err, show_context=True)
    assert session.run_file(str(script)) == EXIT_STATIC_ERROR
    assert f"  --> {script}:1:10\n" in err.getvalue()


class TestInteractiveMode:
  """Independent runs line by line"""

  def test_parse_error_does_not_block_next_line(self, session, out):
    session.run_line("print ;")
    assert not session.had_error
    session.run_line("print 5;")
    assert out.getvalue() == "5\n"

  def test_runtime_error_does_not_block_next_line(self, session, out):
    session.run_line("print 1 / 0;")
    session.run_line('print "ok";')
    assert out.getvalue() == "ok\n"
    assert session.had_runtime_error

  def test_each_result_has_its_own_diagnostics(self, session):
    first = session.run_line("1 +;")
    second = session.run_line("2;")
    assert len(first.diagnostics) == 1
    assert second.diagnostics == []

  def test_handler_does_not_accumulate_diagnostics(self, session):
    for _ in range(3):
      result = session.run_line("1 +;")
      assert len(result.diagnostics) == 1
    session.run_line("print -nil;")
    assert session.error_handler.diagnostics == []


class TestRunHelper:
  """The module level run() convenience"""

  def test_run(self, out, err):
    result = run("print 2 + 2;", out=out, err=err)
    assert out.getvalue() == "4\n"
    assert result.interpreted

  def test_run_mixed_concat_option(self, out, err):
    run('print "v" + 1;', out=out, err=err, allow_mixed_concat=True)
    assert out.getvalue() == "v1\n"

  def test_context_lines(self, out, err):
    session = create_session(out=out, err=err, show_context=True)
    session.run("print 1;\nprint 2 +;")
    assert err.getvalue() == (
        "[line 2] Error at ';': Expect expression.\n"
        "  --> <input>:2:10\n"
        "   2: print 2 +;\n"
        "               ^\n"
    )


class TestDeepNesting:
  """Inputs nested deeper than the evaluator's stack allows"""

  def test_deep_unary_chain_is_a_parse_diagnostic(self, session, out):
    result = session.run("print " + "-" * 5000 + "1;")
    assert out.getvalue() == ""
    assert not result.interpreted
    assert result.diagnostics[0].kind == DiagnosticKind.PARSE
    assert result.diagnostics[0].message == "Expression nesting too deep."
    assert session.exit_status() == EXIT_STATIC_ERROR

  def test_deep_parentheses_are_a_parse_diagnostic(self, session):
    result = session.run("print " + "(" * 3000 + "1" + ")" * 3000 + ";")
    assert [d.message for d in result.diagnostics] == ["Expression nesting too deep."]

  def test_statements_after_deep_one_still_parse(self, session):
    result = session.run("print " + "-" * 5000 + "1;\nprint 2;")
    assert len(result.statements) == 1

  def test_next_line_runs_after_deep_line(self, session, out):
    session.run_line("print " + "-" * 5000 + "1;")
    session.run_line("print 7;")
    assert out.getvalue() == "7\n"
