"""
Render board states from a 2048 game transcript as static PNG images.
Either a single state or a contact sheet of evenly sampled states.
"""

import argparse
import json
from typing import List, Optional

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.patches as mpatches


# Color scheme for tiles (similar to the original 2048 game)
TILE_COLORS = {
    0: '#CDC1B4',      # Empty
    2: '#EEE4DA',      # 2
    4: '#EDE0C8',      # 4
    8: '#F2B179',      # 8
    16: '#F59563',     # 16
    32: '#F67C5F',     # 32
    64: '#F65E3B',     # 64
    128: '#EDCF72',    # 128
    256: '#EDCC61',    # 256
    512: '#EDC850',    # 512
    1024: '#EDC53F',   # 1024
    2048: '#EDC22E',   # 2048
}
LARGE_TILE_COLOR = '#3C3A32'
DARK_TEXT_COLOR = '#776E65'
LIGHT_TEXT_COLOR = '#F9F6F2'
BACKGROUND_COLOR = '#FAF8EF'


def get_tile_color(value):
    return TILE_COLORS.get(value, LARGE_TILE_COLOR)


def get_text_color(value):
    return DARK_TEXT_COLOR if value <= 4 else LIGHT_TEXT_COLOR


def caption(state_info) -> str:
    """Text shown under a board: move, action and how the game ended."""
    text = f"Move: {state_info['move_num']} | Action: {state_info['action']}"
    if state_info.get('changed') is False:
        text += " (no change)"
    if state_info.get('outcome') in ('won', 'lost'):
        text += f" | {state_info['outcome'].capitalize()}"
    return text


def render_game_state(state_info, ax):
    """Draw one transcript board state onto a matplotlib axis."""
    game_state = state_info['state']
    size = len(game_state)
    ax.clear()
    ax.set_xlim(0, size)
    ax.set_ylim(0, size)
    ax.set_aspect('equal')
    ax.axis('off')

    for i in range(size):
        for j in range(size):
            value = game_state[i][j]

            rect = mpatches.Rectangle((j, size - 1 - i), 1, 1,
                                      facecolor=get_tile_color(value),
                                      edgecolor='#BBADA0',
                                      linewidth=3)
            ax.add_patch(rect)

            if value != 0:
                fontsize = 40 if value < 100 else (32 if value < 1000 else 24)
                ax.text(j + 0.5, size - 1 - i + 0.5, str(value),
                        ha='center', va='center',
                        fontsize=fontsize, fontweight='bold',
                        color=get_text_color(value))

    ax.text(size / 2, -0.3, caption(state_info),
            ha='center', va='top', fontsize=14, fontweight='bold', color=DARK_TEXT_COLOR)


def load_game_states(log_file) -> List[dict]:
    """
    Load the board states of a play_2048 transcript.

    Reading stops at the final stats entry, whose outcome is attached to the
    last board state.

    Args:
        log_file: JSON transcript path

    Returns:
        One dict per board with 'state', 'action', 'move_num', 'changed'
        and, on the last board of a finished transcript, 'outcome'
    """
    with open(log_file, 'r') as f:
        data = json.load(f)

    states = []
    for i, entry in enumerate(data):
        if 'game_state' in entry:
            board = entry['game_state']
            if not board or any(len(row) != len(board) for row in board):
                raise ValueError(f"Malformed board state at transcript entry {i}")
            states.append({
                'state': board,
                'action': entry.get('action', 'UNKNOWN'),
                'move_num': i,
                'changed': entry.get('changed'),
            })
        elif 'outcome' in entry:
            if states:
                states[-1]['outcome'] = entry['outcome']
            break

    return states


def sample_indices(count: int, frames: int) -> List[int]:
    """Pick up to `frames` evenly spaced indices out of `count`, keeping both ends."""
    return sorted(set(np.linspace(0, count - 1, min(frames, count), dtype=int).tolist()))


def render_move(log_file, output_file, move: int = -1) -> str:
    """
    Save the board state at one transcript index as a PNG.

    Args:
        log_file: JSON transcript written by play_2048
        output_file: PNG path to write
        move: Index into the recorded states; negative counts from the end

    Returns:
        The path that was written
    """
    states = load_game_states(log_file)
    if not states:
        raise ValueError(f"No board states found in {log_file}")
    if not -len(states) <= move < len(states):
        raise ValueError(f"Move {move} out of range, transcript has {len(states)} states")

    state_info = states[move]
    fig, ax = plt.subplots(figsize=(6, 6.5))
    render_game_state(state_info, ax)
    fig.savefig(output_file, format='png', bbox_inches='tight', dpi=100,
                facecolor=BACKGROUND_COLOR, edgecolor='none')
    plt.close(fig)
    return output_file


def render_contact_sheet(log_file, output_file, frames: int = 8) -> str:
    """Save `frames` evenly sampled board states side by side as one PNG."""
    if frames < 1:
        raise ValueError(f"frames must be positive, got {frames}")
    states = load_game_states(log_file)
    if not states:
        raise ValueError(f"No board states found in {log_file}")

    indices = sample_indices(len(states), frames)
    fig, axes = plt.subplots(1, len(indices), figsize=(6 * len(indices), 6.5), squeeze=False)

    for ax, index in zip(axes[0], indices):
        state_info = states[index]
        render_game_state(state_info, ax)

    fig.savefig(output_file, format='png', bbox_inches='tight', dpi=100,
                facecolor=BACKGROUND_COLOR, edgecolor='none')
    plt.close(fig)
    return output_file


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Render 2048 board states from a game transcript')
    parser.add_argument('--log_file', type=str, required=True,
                        help='JSON transcript written by play_2048 --log_file')
    parser.add_argument('--output', type=str, default='board.png',
                        help='PNG file to write')
    parser.add_argument('--move', type=int, default=-1,
                        help='Transcript index to render (default: last state)')
    parser.add_argument('--frames', type=int, default=None,
                        help='Render this many evenly sampled states side by side instead')

    args = parser.parse_args(argv)

    try:
        if args.frames is not None:
            output = render_contact_sheet(args.log_file, args.output, args.frames)
        else:
            output = render_move(args.log_file, args.output, args.move)
    except (OSError, ValueError) as e:
        print(f"✗ Error: {e}")
        return 1

    print(f"✓ Saved {output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
