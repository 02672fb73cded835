import json

import pytest

from render_board import (
    caption,
    get_text_color,
    get_tile_color,
    load_game_states,
    main,
    render_contact_sheet,
    render_move,
    sample_indices,
)

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


@pytest.fixture
def transcript(tmp_path):
    entries = [
        {"game_state": [[2, 0, 0, 0], [0, 0, 0, 0], [0, 0, 2, 0], [0, 0, 0, 0]], "action": "INITIAL", "mode": "easy"},
        {"game_state": [[2, 0, 0, 0], [2, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]], "action": "LEFT", "changed": True},
        {"game_state": [[4, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 4], [0, 0, 0, 0]], "action": "UP", "changed": True},
        {"outcome": "in_progress", "total_moves": 2, "mode": "easy", "seed": 1},
    ]
    path = tmp_path / "game.json"
    path.write_text(json.dumps(entries))
    return path


def test_load_game_states_skips_final_stats(transcript):
    states = load_game_states(transcript)
    assert [state["action"] for state in states] == ["INITIAL", "LEFT", "UP"]
    assert [state["move_num"] for state in states] == [0, 1, 2]


def test_sample_indices_keeps_both_ends():
    assert sample_indices(10, 4) == [0, 3, 6, 9]
    assert sample_indices(3, 8) == [0, 1, 2]
    assert sample_indices(5, 1) == [0]


def test_tile_colors():
    assert get_tile_color(0) == '#CDC1B4'
    assert get_tile_color(8192) == '#3C3A32'
    assert get_text_color(2) != get_text_color(64)


def test_render_last_move(transcript, tmp_path):
    output = tmp_path / "board.png"
    assert render_move(transcript, str(output)) == str(output)
    assert output.read_bytes().startswith(PNG_MAGIC)


def test_render_move_out_of_range(transcript, tmp_path):
    with pytest.raises(ValueError):
        render_move(transcript, str(tmp_path / "board.png"), move=3)


def test_render_contact_sheet(transcript, tmp_path):
    output = tmp_path / "sheet.png"
    render_contact_sheet(transcript, str(output), frames=2)
    assert output.read_bytes().startswith(PNG_MAGIC)


def test_empty_transcript_rejected(tmp_path):
    path = tmp_path / "empty.json"
    path.write_text("[]")
    with pytest.raises(ValueError):
        render_move(path, str(tmp_path / "board.png"))
    with pytest.raises(ValueError):
        render_contact_sheet(path, str(tmp_path / "sheet.png"))


def test_main_success_and_failure(transcript, tmp_path, capsys):
    output = tmp_path / "first.png"
    assert main(["--log_file", str(transcript), "--output", str(output), "--move", "0"]) == 0
    assert output.exists()

    assert main(["--log_file", str(tmp_path / "missing.json")]) == 1
    assert "Error" in capsys.readouterr().out


def test_final_stats_attach_outcome_and_end_the_transcript(tmp_path):
    entries = [
        {"game_state": [[2, 2], [0, 0]], "action": "INITIAL"},
        {"game_state": [[2, 2], [0, 0]], "action": "DOWN", "changed": False},
        {"outcome": "won", "total_moves": 1, "mode": "easy", "seed": 3},
        {"game_state": [[8, 8], [8, 8]], "action": "LEFT", "changed": True},
    ]
    path = tmp_path / "game.json"
    path.write_text(json.dumps(entries))

    states = load_game_states(path)
    assert [state["move_num"] for state in states] == [0, 1]
    assert states[-1]["changed"] is False
    assert states[-1]["outcome"] == "won"
    assert "outcome" not in states[0]


def test_in_progress_outcome_not_shown_in_caption(transcript):
    states = load_game_states(transcript)
    assert states[-1]["outcome"] == "in_progress"
    assert caption(states[-1]) == "Move: 2 | Action: UP"


def test_caption_marks_unchanged_moves_and_result():
    assert caption({"move_num": 0, "action": "INITIAL", "changed": None}) == "Move: 0 | Action: INITIAL"
    assert caption({"move_num": 4, "action": "LEFT", "changed": False}) == "Move: 4 | Action: LEFT (no change)"
    assert caption({"move_num": 9, "action": "UP", "changed": True, "outcome": "lost"}) == "Move: 9 | Action: UP | Lost"


def test_malformed_board_rejected(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps([{"game_state": [[2, 0, 0], [0, 0]], "action": "INITIAL"}]))
    with pytest.raises(ValueError):
        load_game_states(path)
    assert main(["--log_file", str(path), "--output", str(tmp_path / "bad.png")]) == 1
