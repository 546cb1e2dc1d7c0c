"""
Tests for the process runner — blocking and streamed execution.

These drive real child processes through ``sys.executable`` so they
run anywhere the test suite does.
"""

import sys
import textwrap
from pathlib import Path

import pytest

from devsetup.adapters.mock import MockCommandRunner
from devsetup.adapters.shell.process import ProcessRunner
from devsetup.core.errors import CommandError
from devsetup.core.models.command import CommandSpec, ExecutionMode

PY = sys.executable


def _script(body: str) -> tuple[str, ...]:
    return ("-c", textwrap.dedent(body))


# ── CommandSpec ──────────────────────────────────────────────────────


class TestCommandSpec:
    def test_argv(self):
        spec = CommandSpec.blocking("sdkmanager", "--licenses")
        assert spec.argv == ["sdkmanager", "--licenses"]
        assert spec.mode == ExecutionMode.BLOCKING

    def test_streamed_factory(self):
        spec = CommandSpec.streamed("sdkmanager", "emulator")
        assert spec.mode == ExecutionMode.STREAMED

    def test_auto_answer_stdin(self):
        spec = CommandSpec(executable="x", auto_answer="y", answer_repeat=3)
        assert spec.stdin_text == "y\ny\ny\n"

    def test_no_auto_answer(self):
        assert CommandSpec(executable="x").stdin_text is None

    def test_frozen(self):
        spec = CommandSpec(executable="x")
        with pytest.raises(Exception):
            spec.executable = "y"

    def test_display_quotes(self):
        spec = CommandSpec.blocking("sdkmanager", "platforms;android-29")
        assert "'platforms;android-29'" in spec.display()


# ── Blocking mode ────────────────────────────────────────────────────


class TestBlocking:
    def test_success_captures_output(self, make_context):
        spec = CommandSpec.blocking(PY, *_script("print('hello')"))
        result = ProcessRunner().execute(spec, make_context())
        assert result.exit_code == 0
        assert "hello" in result.output

    def test_nonzero_raises_command_error(self, make_context):
        spec = CommandSpec.blocking(PY, *_script("""
            import sys
            print('partial output')
            sys.exit(3)
        """))
        with pytest.raises(CommandError) as exc:
            ProcessRunner().execute(spec, make_context())
        assert exc.value.exit_code == 3
        assert "partial output" in exc.value.output
        assert exc.value.argv[0] == PY

    def test_stderr_is_captured(self, make_context):
        spec = CommandSpec.blocking(PY, *_script("""
            import sys
            sys.stderr.write('went wrong\\n')
            sys.exit(1)
        """))
        with pytest.raises(CommandError) as exc:
            ProcessRunner().execute(spec, make_context())
        assert "went wrong" in exc.value.output

    def test_auto_answer_feeds_prompts(self, make_context):
        spec = CommandSpec.blocking(
            PY,
            *_script("""
                import sys
                answers = [input('Accept? ') for _ in range(3)]
                sys.exit(0 if answers == ['y', 'y', 'y'] else 1)
            """),
            auto_answer="y",
        )
        result = ProcessRunner().execute(spec, make_context())
        assert result.exit_code == 0

    def test_without_auto_answer_stdin_is_empty(self, make_context):
        spec = CommandSpec.blocking(PY, *_script("input()"))
        with pytest.raises(CommandError):
            ProcessRunner().execute(spec, make_context())

    def test_inherits_environment(self, make_context, monkeypatch):
        monkeypatch.setenv("DEVSETUP_TEST_MARKER", "inherited")
        spec = CommandSpec.blocking(PY, *_script("""
            import os
            print(os.environ['DEVSETUP_TEST_MARKER'])
        """))
        result = ProcessRunner().execute(spec, make_context())
        assert "inherited" in result.output

    def test_inherits_working_directory(self, make_context, tmp_path):
        spec = CommandSpec.blocking(PY, *_script("import os; print(os.getcwd())"))
        result = ProcessRunner().execute(spec, make_context())
        assert Path(result.output.strip()).resolve() == tmp_path.resolve()

    def test_missing_executable(self, make_context, tmp_path):
        spec = CommandSpec.blocking(str(tmp_path / "no-such-tool"), "--licenses")
        with pytest.raises(CommandError) as exc:
            ProcessRunner().execute(spec, make_context())
        assert exc.value.exit_code == 127

    def test_undecodable_output_is_replaced(self, make_context):
        spec = CommandSpec.blocking(PY, *_script("""
            import sys
            sys.stdout.buffer.write(b'caf\\xe9\\n')
        """))
        result = ProcessRunner().execute(spec, make_context())
        assert result.exit_code == 0
        assert result.output.strip() == "caf\ufffd"


# ── Streamed mode ────────────────────────────────────────────────────


class TestStreamed:
    def test_lines_relayed_to_sink(self, make_context, sink):
        spec = CommandSpec.streamed(PY, *_script("""
            for i in range(3):
                print(f'line {i}', flush=True)
        """))
        result = ProcessRunner().execute(spec, make_context())

        assert sink.lines == ["line 0", "line 1", "line 2"]
        assert result.output == "line 0\nline 1\nline 2"

    def test_nonzero_raises_command_error(self, make_context, sink):
        spec = CommandSpec.streamed(PY, *_script("""
            import sys
            print('downloading', flush=True)
            sys.exit(2)
        """))
        with pytest.raises(CommandError) as exc:
            ProcessRunner().execute(spec, make_context())
        assert exc.value.exit_code == 2
        assert "downloading" in exc.value.output
        assert sink.lines == ["downloading"]

    def test_streamed_auto_answer(self, make_context):
        spec = CommandSpec.streamed(
            PY,
            *_script("""
                import sys
                sys.exit(0 if input() == 'no' else 1)
            """),
            auto_answer="no",
        )
        assert ProcessRunner().execute(spec, make_context()).exit_code == 0

    def test_missing_executable(self, make_context, tmp_path):
        spec = CommandSpec.streamed(str(tmp_path / "no-such-tool"))
        with pytest.raises(CommandError) as exc:
            ProcessRunner().execute(spec, make_context())
        assert exc.value.exit_code == 127

    def test_undecodable_output_is_replaced(self, make_context, sink):
        spec = CommandSpec.streamed(PY, *_script("""
            import sys
            sys.stdout.buffer.write(b'caf\\xe9\\n')
        """))
        result = ProcessRunner().execute(spec, make_context())
        assert result.exit_code == 0
        assert sink.lines == ["caf\ufffd"]

    def test_error_keeps_only_recent_lines(self, make_context, sink):
        spec = CommandSpec.streamed(PY, *_script("""
            import sys
            for i in range(1000):
                print(f'line {i}')
            sys.exit(1)
        """))
        with pytest.raises(CommandError) as exc:
            ProcessRunner().execute(spec, make_context())

        assert len(sink.lines) == 1000
        kept = exc.value.output.splitlines()
        assert kept[0] == "line 800"
        assert kept[-1] == "line 999"


# ── Availability ─────────────────────────────────────────────────────


class TestAvailability:
    def test_python_available(self):
        assert ProcessRunner().is_available(PY)

    def test_missing_path(self, tmp_path):
        assert not ProcessRunner().is_available(str(tmp_path / "missing"))

    def test_missing_on_path(self):
        assert not ProcessRunner().is_available("devsetup-definitely-not-a-tool")


# ── Mock runner ──────────────────────────────────────────────────────


class TestMockRunner:
    def test_records_calls(self, make_context, sink):
        mock = MockCommandRunner()
        spec = CommandSpec.blocking("sdkmanager", "--licenses")
        result = mock.execute(spec, make_context())

        assert mock.call_count == 1
        assert mock.call_log[0] is spec
        assert result.output == "[mock] executed"
        assert sink.lines == ["[mock] executed"]

    def test_configured_failure(self, make_context):
        mock = MockCommandRunner()
        mock.set_failure("--licenses", exit_code=4)
        with pytest.raises(CommandError) as exc:
            mock.execute(CommandSpec.blocking("sdkmanager", "--licenses"), make_context())
        assert exc.value.exit_code == 4

    def test_reset(self, make_context):
        mock = MockCommandRunner()
        mock.set_failure("x")
        mock.execute(CommandSpec.blocking("y"), make_context())
        mock.reset()
        assert mock.call_count == 0
        mock.execute(CommandSpec.blocking("x"), make_context())
