from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from ..catalog.models import Model, get_model


class Stage:
    """A pipeline step turning an optional input artifact into a new artifact.

    Subclasses implement ``__call__``. A stage never modifies its input file;
    it writes a new artifact (or returns its input unchanged for identity).
    """

    name = "stage"

    def __init__(self) -> None:
        self._output_path: Optional[Path] = None
        self._model: Optional[Model] = None

    @property
    def declared_output(self) -> Optional[Path]:
        return self._output_path

    @property
    def configured_model(self) -> Optional[Model]:
        return self._model

    def output_path(self, path: Union[str, Path]) -> "Stage":
        self._output_path = Path(path)
        return self

    def configure_from_model(self, model: Union[Model, str]) -> "Stage":
        self._model = get_model(model) if isinstance(model, str) else model
        return self

    def __call__(self, input_path: Optional[Path]) -> Path:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} model={self._model.id if self._model else None}>"
