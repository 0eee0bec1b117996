from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional, Union

from .catalog.models import Model, get_model
from .errors import PipelineError
from .infrastructure.files import discard

log = logging.getLogger(__name__)

StageCallable = Callable[[Optional[Path]], Union[str, Path]]


class Pipeline:
    """Run stages in order, feeding each stage's artifact to the next.

    Intermediate artifacts are deleted once the following stage has consumed
    them. The caller's initial input and any output a stage was explicitly
    told to write are never deleted. If a stage raises, artifacts produced so
    far are removed and the exception propagates unchanged.
    """

    def __init__(self) -> None:
        self._stages: List[StageCallable] = []
        self._model: Optional[Model] = None

    @property
    def stages(self) -> List[StageCallable]:
        return list(self._stages)

    def model(self, model: Union[Model, str]) -> "Pipeline":
        self._model = get_model(model) if isinstance(model, str) else model
        for stage in self._stages:
            self._configure(stage)
        return self

    def pipe(self, stage: StageCallable) -> "Pipeline":
        self._configure(stage)
        self._stages.append(stage)
        return self

    def _configure(self, stage: StageCallable) -> None:
        # Stages already configured for a model keep their own.
        if self._model is None or not hasattr(stage, "configure_from_model"):
            return
        if getattr(stage, "configured_model", None) is None:
            stage.configure_from_model(self._model)

    def process(self, initial_input: Union[str, Path, None] = None) -> Path:
        if not self._stages:
            raise PipelineError("Pipeline has no stages")

        initial = Path(initial_input) if initial_input is not None else None
        current = initial
        ephemeral: Optional[Path] = None
        total = len(self._stages)

        for position, stage in enumerate(self._stages, start=1):
            label = getattr(stage, "name", type(stage).__name__)
            log.info("Running stage %d/%d: %s", position, total, label)
            try:
                result = Path(stage(current))
            except BaseException as exc:
                log.warning("Stage %d/%d (%s) failed: %s", position, total, label, exc)
                if ephemeral is not None:
                    discard(ephemeral)
                raise

            if result == current:
                continue
            if ephemeral is not None:
                discard(ephemeral)
            declared = getattr(stage, "declared_output", None)
            ephemeral = None if result in (initial, declared) else result
            current = result

        return current
