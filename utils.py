# utils.py

from typing import List, Optional

from engine import SimulationStep


def get_color(page: Optional[int], step: Optional[SimulationStep] = None) -> str:
    """Return a color for one frame of the current step."""
    if page is None:
        return "#d3d3d3"  # empty frame
    if step is not None and page == step.reference:
        return "#1db954" if step.is_hit else "#ef4444"
    return "#90ee90"


def frame_labels(frames) -> List[str]:
    return [f"F{i}: " + (f"P{page}" if page is not None else "-") for i, page in enumerate(frames)]


def format_frames(frames) -> str:
    return ", ".join("-" if page is None else str(page) for page in frames)
