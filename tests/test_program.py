"""
Tests for the output program — append-only fragment log.
"""

import pytest

from multifile_loader.core.services.program import OutputProgram, ProgramFrozenError


class TestOutputProgram:
    def test_order_preserved(self):
        program = OutputProgram()
        program.emit("a;", "b;")
        program.extend(["c;"])
        assert list(program) == ["a;", "b;", "c;"]
        assert program.render() == "a;\nb;\nc;"

    def test_empty_fragments_skipped(self):
        program = OutputProgram()
        program.emit("", "a;", "")
        assert len(program) == 1

    def test_freeze_blocks_emission(self):
        program = OutputProgram(["a;"])
        assert program.freeze() == ("a;",)
        assert program.frozen
        with pytest.raises(ProgramFrozenError):
            program.emit("b;")

    def test_render_freezes(self):
        program = OutputProgram(["a;"])
        program.render()
        with pytest.raises(ProgramFrozenError):
            program.extend(["b;"])

    def test_render_idempotent(self):
        program = OutputProgram(["a;", "b;"])
        assert program.render() == program.render()
