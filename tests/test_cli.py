from narde.cli.boardDisplay import BoardDisplay
from narde.cli.game import CLISetup, NardeCLI, main
from narde.core.dice import Dice
from narde.core.state import NardeState


def test_board_render_plain():
    state = NardeState()
    lines = BoardDisplay(state, clear_screen=False, use_color=False).render()
    assert lines[0] == "--- Board ---"
    text = "\n".join(lines)
    assert "W15" in text
    assert "B15" in text
    assert "Off  W:0 | B:0" in text
    assert "Dice" not in text

    state.start_turn(0, Dice(5, 2))
    lines = BoardDisplay(state, clear_screen=False, use_color=False).render()
    assert lines[-1] == "Dice (5, 2)"


def test_summarize_counts_results():
    results = [
        {"winner": 0, "result_type": "WIN", "turns": 80},
        {"winner": 1, "result_type": "MARS", "turns": 60},
        {"winner": None, "result_type": "TIE", "turns": 100},
        {"winner": None, "result_type": "UNFINISHED", "turns": 10},
    ]
    summary = NardeCLI.summarize(results)
    assert "games=4" in summary
    assert "white=1 (mars 0)" in summary
    assert "black=1 (mars 1)" in summary
    assert "ties=1 unfinished=1" in summary
    assert "avg_turns=62.5" in summary


def test_parse_args_defaults():
    args = CLISetup.parse_args([])
    assert args.games == 1
    assert args.scoring == "winloss_scoring"
    assert not args.watch


def test_main_runs_a_short_session(capsys):
    assert main(["--games", "2", "--seed", "5", "--max-turns", "10", "--no-color"]) == 0
    out = capsys.readouterr().out
    assert "games=2" in out
    assert "unfinished=2" in out
