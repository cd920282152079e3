# app/controller.py
"""
Session state machine for one scan.

The whole session is a single value, one of Upload / Analyzing / Results /
Error. Images and the analysis result only live inside the variant that owns
them, so resetting to Upload drops them together.
"""

import logging
import os
import time
from dataclasses import dataclass
from typing import Callable, Optional, Union

from utils.errors import AuraError, GenericFailure
from utils.image_payload import ImagePayload
from utils.prompts import Mode
from utils.schemas import AnalysisResult

logger = logging.getLogger(__name__)

SCAN_DELAY = float(os.environ.get("AURA_SCAN_DELAY", "1.5"))
FALLBACK_MESSAGE = "Something went wrong during analysis. Please try a different photo."

FIRST_STEP = "Mapping facial topography..."
LAST_STEP = "Synthesizing corrective protocol..."


class InvalidTransition(Exception):
    pass


@dataclass(frozen=True)
class Upload:
    name = "upload"


@dataclass(frozen=True)
class Analyzing:
    original: ImagePayload
    mode: Mode
    name = "analyzing"


@dataclass(frozen=True)
class Results:
    original: ImagePayload
    synthesized: ImagePayload
    result: AnalysisResult
    mode: Mode
    name = "results"


@dataclass(frozen=True)
class Error:
    message: str
    kind: str = GenericFailure.kind
    name = "error"


SessionState = Union[Upload, Analyzing, Results, Error]


def initial_state() -> SessionState:
    return Upload()


def begin(state: SessionState, original: ImagePayload, mode) -> Analyzing:
    """Upload -> Analyzing once a source image has been acquired."""
    if not isinstance(state, Upload):
        raise InvalidTransition(f"cannot start a scan from the {state.name} state")
    return Analyzing(original=original, mode=Mode(mode))


def run(
    state: Analyzing,
    client,
    delay: float = SCAN_DELAY,
    on_step: Optional[Callable[[str], None]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> SessionState:
    """Run synthesis then analysis. Returns Results or Error, never raises for remote failures."""
    if not isinstance(state, Analyzing):
        raise InvalidTransition(f"cannot run a scan from the {state.name} state")

    def step(label):
        logger.info("[scan] %s", label)
        if on_step is not None:
            on_step(label)

    try:
        step(FIRST_STEP)
        if delay > 0:
            sleep(delay)

        step(state.mode.scan_step)
        synthesized = client.synthesize(state.original, state.mode)

        step(LAST_STEP)
        result = client.analyze(state.original, synthesized, state.mode)
    except AuraError as e:
        logger.warning("[scan] %s: %s", e.kind, e.message)
        return Error(message=e.message or FALLBACK_MESSAGE, kind=e.kind)
    except Exception:
        logger.exception("[scan] unexpected failure")
        return Error(message=FALLBACK_MESSAGE, kind=GenericFailure.kind)

    return Results(
        original=state.original,
        synthesized=synthesized,
        result=result,
        mode=state.mode,
    )


def reset(state: SessionState) -> Upload:
    """Explicit "new scan" / "try again" action."""
    return Upload()


def download_name(state: Results, now: Optional[float] = None) -> str:
    stamp = int((time.time() if now is None else now) * 1000)
    return f"aura-{state.mode.value}-{stamp}.{state.synthesized.extension}"
