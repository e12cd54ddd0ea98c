from __future__ import annotations

import io

from cabin import CabinTiming
from cabin.console import Console


def run_console(script: str) -> tuple:
    stdout = io.StringIO()
    console = Console(stdin=io.StringIO(script), stdout=stdout, timing=CabinTiming(time_unit=0.01))
    code = console.run()
    return code, stdout.getvalue(), console


class TestConsole:
    def test_outside_call_then_exit(self):
        code, output, console = run_console("5\n1\n4\ndown\n3\n")
        assert code == 0
        assert "Queued Request [Floor: 4, Direction: down]." in output
        assert "Stopping the elevator..." in output
        assert not console.cabin.running

    def test_inside_call(self):
        code, output, _ = run_console("5\n2\n3\n3\n")
        assert "Queued Request [Floor: 3 (inside)]." in output

    def test_invalid_input_is_reported_and_skipped(self):
        script = "\n".join(
            [
                "abc",  # top floor not a number
                "0",  # top floor too low
                "5",
                "x",  # menu choice not a number
                "1", "9", "up",  # floor out of range
                "1", "2", "sideways",  # bad direction
                "1", "1", "down",  # boundary rejected by the cabin
                "2", "1",  # already there
                "7",  # unknown choice
                "3",
            ]
        )
        code, output, console = run_console(script + "\n")
        assert code == 0
        assert "Invalid input. Please enter a valid integer." in output
        assert "Invalid input. The top floor must be at least 1." in output
        assert "Invalid input. Please enter a valid number." in output
        assert "Invalid floor. Please select a floor between 1 and 5." in output
        assert "Invalid direction 'sideways'. Please enter 'up' or 'down'." in output
        assert "Invalid request. Floor 1 can only go up, and the top floor can only go down." in output
        assert "You are already on floor 1." in output
        assert "Invalid choice. Please try again." in output
        assert "Queued" not in output
        assert not console.cabin.pending

    def test_show_queue_when_idle(self):
        _, output, _ = run_console("5\n4\n3\n")
        assert "No request in progress." in output

    def test_end_of_input_stops_cabin(self):
        code, output, console = run_console("5\n")
        assert code == 0
        assert "Input closed. Stopping the elevator..." in output
        assert not console.cabin.running

    def test_no_top_floor(self):
        code, _, console = run_console("")
        assert code == 1
        assert console.cabin is None
