"""imaging.prompts

Prompt builders for the brain-scan image.

Levels are turned into plain visual descriptions here; the model never sees
raw numbers, so the picture only changes when a level crosses a band.
"""

from __future__ import annotations

from core.state import Substance


def describe_dopamine(level: float) -> str:
    if level > 1.0:
        return "overstimulated and glowing intensely red"
    if level < 0.5:
        return "dim and dark grey"
    return "glowing with a healthy steady blue light"


def describe_serotonin(level: float) -> str:
    if level > 1.0:
        return "bright"
    if level < 0.5:
        return "fragmented and dark"
    return "connected and flowing smoothly"


def build_scan_prompt(dopamine: float, serotonin: float, substance: Substance) -> str:
    substance = Substance(substance)
    return f"""
A highly sophisticated, photorealistic 3D scientific visualization of a whole human brain, centered in the frame.
The view should be a side profile or 3/4 view, suspended in a dark void with digital data streams.

Neurochemical status to visualize:
- Dopamine receptors (frontal lobe area) are {describe_dopamine(float(dopamine))}.
- Serotonin pathways (central brain) are {describe_serotonin(float(serotonin))}.

The overall aesthetic should represent the effects of {substance.value} on the brain.
Cinematic lighting, 8k resolution, macro photography style, translucent brain tissue, HUD interface elements.
""".strip()


def build_edit_prompt(instruction: str) -> str:
    instruction = (instruction or "").strip()
    return (
        "Edit the attached brain visualization. Keep the composition, camera angle and style; "
        f"apply only this change: {instruction}"
    )
