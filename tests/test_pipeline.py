from pathlib import Path

import pytest

from eink_pipeline.errors import PipelineError, RenderFailure
from eink_pipeline.pipeline import Pipeline
from eink_pipeline.stages import ImageStage, Stage


def _writing_stage(directory: Path, name: str, calls: list):
    def stage(input_path):
        calls.append((name, input_path))
        out = directory / f"{name}.bin"
        out.write_bytes(name.encode())
        return out

    return stage


class DeclaredStage(Stage):
    name = "declared"

    def __call__(self, input_path):
        self._output_path.write_bytes(b"kept")
        return self._output_path


def test_stages_run_in_order_and_thread_artifacts(tmp_path):
    calls = []
    pipeline = Pipeline()
    for name in ("a", "b", "c"):
        pipeline.pipe(_writing_stage(tmp_path, name, calls))

    result = pipeline.process()

    assert result == tmp_path / "c.bin"
    assert calls == [("a", None), ("b", tmp_path / "a.bin"), ("c", tmp_path / "b.bin")]


def test_intermediate_artifacts_are_removed(tmp_path):
    calls = []
    pipeline = Pipeline()
    for name in ("a", "b", "c"):
        pipeline.pipe(_writing_stage(tmp_path, name, calls))

    result = pipeline.process()

    assert not (tmp_path / "a.bin").exists()
    assert not (tmp_path / "b.bin").exists()
    assert result.read_bytes() == b"c"


def test_initial_input_is_never_removed(tmp_path):
    source = tmp_path / "source.bin"
    source.write_bytes(b"source")
    pipeline = Pipeline().pipe(_writing_stage(tmp_path, "a", []))

    pipeline.process(source)

    assert source.read_bytes() == b"source"


def test_declared_output_survives_later_stages(tmp_path):
    declared = DeclaredStage().output_path(tmp_path / "keep.bin")
    pipeline = Pipeline().pipe(declared).pipe(_writing_stage(tmp_path, "last", []))

    pipeline.process()

    assert (tmp_path / "keep.bin").read_bytes() == b"kept"


def test_identity_stage_keeps_artifact(tmp_path):
    pipeline = Pipeline()
    pipeline.pipe(_writing_stage(tmp_path, "a", []))
    pipeline.pipe(lambda input_path: input_path)

    result = pipeline.process()

    assert result == tmp_path / "a.bin"
    assert result.exists()


def test_failing_first_stage_short_circuits():
    error = RenderFailure("browser crashed")
    second_calls = []

    def failing(input_path):
        raise error

    def second(input_path):
        second_calls.append(input_path)
        return input_path

    pipeline = Pipeline().pipe(failing).pipe(second)

    with pytest.raises(RenderFailure) as excinfo:
        pipeline.process()

    assert excinfo.value is error
    assert second_calls == []


def test_failure_removes_produced_artifacts(tmp_path):
    def failing(input_path):
        raise RenderFailure("late failure")

    pipeline = Pipeline().pipe(_writing_stage(tmp_path, "a", [])).pipe(failing)

    with pytest.raises(RenderFailure):
        pipeline.process()

    assert not (tmp_path / "a.bin").exists()


def test_empty_pipeline_is_an_error():
    with pytest.raises(PipelineError):
        Pipeline().process()


def test_model_configures_stages_without_one():
    unconfigured = ImageStage()
    preconfigured = ImageStage().configure_from_model("og_plus")

    Pipeline().pipe(unconfigured).pipe(preconfigured).model("og_png")

    assert unconfigured.configured_model.id == "og_png"
    assert preconfigured.configured_model.id == "og_plus"


def test_model_applies_to_stages_piped_later():
    stage = ImageStage()

    Pipeline().model("og_bmp").pipe(stage)

    assert stage.stage_config().format == "bmp"
