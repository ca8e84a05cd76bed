"""Smoke tests for the command-line entry point."""

import pytest

from mentionpulse.__main__ import main


class TestCli:
    def test_score(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["score", "Amazing features shipped, love it!"])
        assert capsys.readouterr().out.strip() == "+0.833 positive"

    def test_simulate_runs_ticks(self) -> None:
        main(["simulate", "--ticks", "2", "--interval-ms", "0"])

    def test_no_command_exits(self) -> None:
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 1
