"""engine.sim_runner

Headless runner for quick sanity checks.

This keeps tests deterministic and CI-friendly by avoiding network calls.
It uses a tiny built-in fake image provider.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from core.metrics import deviation_score, wellness_score
from core.state import Stage, Substance

from imaging.errors import NoImageReturned
from imaging.providers.base import ProviderStatus
from imaging.schemas import ImageHandle

from .config import EngineConfig
from .controller import SimulationController
from .reducer import Dose, Event, SetRecoveryDay, SetStage, SetSubstance


@dataclass
class FakeImageProvider:
    """Deterministic provider for tests (no network).

    Image bytes encode the substance and levels, so callers can assert on what was asked.
    """

    fail_with: Optional[Exception] = None
    calls: List[Dict[str, Any]] = field(default_factory=list)

    def status(self) -> ProviderStatus:
        return ProviderStatus(True, "fake", "fake-image")

    def _image(self, text: str) -> ImageHandle:
        if self.fail_with is not None:
            raise self.fail_with
        if not text:
            raise NoImageReturned("No image data generated")
        return ImageHandle(mime_type="image/png", data=base64.b64encode(text.encode("utf-8")).decode("ascii"))

    def generate(self, dopamine: float, serotonin: float, substance: Substance) -> ImageHandle:
        self.calls.append({"op": "generate", "dopamine": dopamine, "serotonin": serotonin, "substance": substance})
        return self._image(f"scan|{Substance(substance).value}|{dopamine:.2f}|{serotonin:.2f}")

    def edit(self, image: ImageHandle, instruction: str) -> ImageHandle:
        self.calls.append({"op": "edit", "instruction": instruction})
        return self._image(f"{image.data}|{instruction.strip()}")


def default_script(substance: Substance = Substance.OPIOIDS) -> List[Event]:
    """Use -> dependence -> dose -> a year of recovery in 30-day steps."""
    script: List[Event] = [SetSubstance(substance)]
    script += [SetStage(s) for s in (Stage.EARLY, Stage.MODERATE, Stage.SEVERE)]
    script.append(Dose())
    script += [SetRecoveryDay(d) for d in range(0, 366, 30)]
    return script


def run_headless_sim(
    script: Optional[Sequence[Event]] = None,
    *,
    config: Optional[EngineConfig] = None,
    provider: Optional[FakeImageProvider] = None,
) -> Dict[str, Any]:
    """Run a deterministic event script and return summary."""
    ctl = SimulationController(config or EngineConfig())
    steps = 0
    for ev in (default_script() if script is None else script):
        ctl.dispatch(ev)
        steps += 1

    state = ctl.state
    provider = provider or FakeImageProvider()
    image = provider.generate(state.dopamine.current, state.serotonin.current, state.substance)

    return {
        "steps": steps,
        "final": state,
        "history": ctl.history.to_records(),
        "deviation": deviation_score(state),
        "wellness": wellness_score(state),
        "image": image,
    }
