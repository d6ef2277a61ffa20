"""Tests for result assembly and the result models."""

import json

import pytest
from pydantic import ValidationError

from core.models import (
    UNSPECIFIED,
    Scene,
    ScriptAnalysisResult,
    SegmentationMethod,
)
from parsers.assembler import assemble
from parsers.base import ChunkSegmentation
from parsers.heuristic_segmenter import PLACEHOLDER_HEADING


def _scene(number: int, heading: str, duration: int = 1) -> Scene:
    return Scene(scene_number=number, heading=heading, duration=duration)


def _outcome(index, scenes, method=SegmentationMethod.MODEL, overlap_headings=0):
    return ChunkSegmentation(
        chunk_index=index, scenes=scenes, method=method, overlap_headings=overlap_headings
    )


# ===================================================================
# assemble
# ===================================================================


class TestAssemble:
    """Tests for parsers.assembler.assemble."""

    def test_renumbers_in_chunk_order(self):
        outcomes = [
            _outcome(1, [_scene(1, "B")], SegmentationMethod.HEURISTIC),
            _outcome(0, [_scene(1, "A"), _scene(2, "A2")], SegmentationMethod.HEURISTIC),
        ]

        result = assemble(outcomes)

        assert [s.heading for s in result.scenes] == ["A", "A2", "B"]
        assert [s.scene_number for s in result.scenes] == [1, 2, 3]

    def test_drops_overlap_duplicate(self):
        outcomes = [
            _outcome(0, [_scene(1, "INT. HALL - DAY"), _scene(2, "INT. STAIRS - NIGHT")]),
            _outcome(
                1,
                [_scene(3, "Int. Stairs – Night"), _scene(4, "EXT. ROOF - DAWN")],
                overlap_headings=1,
            ),
        ]

        result = assemble(outcomes)

        assert [s.heading for s in result.scenes] == [
            "INT. HALL - DAY",
            "INT. STAIRS - NIGHT",
            "EXT. ROOF - DAWN",
        ]
        assert [s.scene_number for s in result.scenes] == [1, 2, 3]

    def test_duplicate_outside_window_kept(self):
        outcomes = [
            _outcome(0, [_scene(1, "INT. HALL - DAY"), _scene(2, "INT. STAIRS - NIGHT")]),
            _outcome(
                1,
                [_scene(3, "EXT. ROOF - DAWN"), _scene(4, "INT. STAIRS - NIGHT")],
                overlap_headings=1,
            ),
        ]

        assert assemble(outcomes).total_scenes == 4

    def test_heuristic_chunks_not_deduplicated(self):
        outcomes = [
            _outcome(0, [_scene(1, "INT. STAIRS - NIGHT")], SegmentationMethod.HEURISTIC),
            _outcome(
                1,
                [_scene(2, "INT. STAIRS - NIGHT")],
                SegmentationMethod.HEURISTIC,
                overlap_headings=1,
            ),
        ]

        assert assemble(outcomes).total_scenes == 2

    def test_empty_returns_placeholder(self):
        result = assemble([])

        assert result.total_scenes == 1
        assert result.scenes[0].heading == PLACEHOLDER_HEADING
        assert any("placeholder" in w for w in result.warnings)
        assert result.metadata["chunk_methods"] == {SegmentationMethod.PLACEHOLDER.value: 1}

    def test_outcomes_without_scenes_return_placeholder(self):
        result = assemble(
            [_outcome(0, [], SegmentationMethod.PARAGRAPH)],
            metadata={"chunk_methods": {"paragraph": 1}},
        )

        assert result.total_scenes == 1
        assert result.scenes[0].heading == PLACEHOLDER_HEADING
        assert result.metadata["chunk_methods"] == {"paragraph": 1, "placeholder": 1}

    def test_totals_and_passthrough(self):
        outcomes = [_outcome(0, [_scene(1, "A", duration=2), _scene(2, "B", duration=3)])]

        result = assemble(
            outcomes, "MY SCRIPT", warnings=["note"], metadata={"chunks": 1}
        )

        assert result.title == "MY SCRIPT"
        assert result.total_scenes == 2
        assert result.estimated_duration == 5
        assert result.warnings == ["note"]
        assert result.metadata == {"chunks": 1}


# ===================================================================
# Models
# ===================================================================


class TestSceneModel:
    def test_unspecified_defaults(self):
        scene = Scene(scene_number=1, heading="X", location=None, time_of_day="  ")

        assert scene.location == UNSPECIFIED
        assert scene.time_of_day == UNSPECIFIED

    def test_characters_normalised(self):
        scene = Scene(
            scene_number=1,
            heading="X",
            characters=["anna", "ANNA", " bob  smith "] + [f"extra {i}" for i in range(12)],
        )

        assert scene.characters[:2] == ["ANNA", "BOB SMITH"]
        assert len(scene.characters) == 10

    @pytest.mark.parametrize(
        "fields",
        [
            {"scene_number": 0},
            {"duration": 0},
            {"page_start": 3, "page_end": 2},
        ],
    )
    def test_invalid_values(self, fields):
        with pytest.raises(ValidationError):
            Scene(**{"scene_number": 1, "heading": "X", **fields})

    def test_frozen(self):
        scene = _scene(1, "X")

        with pytest.raises(ValidationError):
            scene.heading = "Y"

    def test_populate_by_alias(self):
        scene = Scene(sceneNumber=2, heading="X", plotSummary="p", timeOfDay="DAY")

        assert scene.scene_number == 2
        assert scene.plot_summary == "p"
        assert scene.time_of_day == "DAY"

    def test_camel_case_dump(self):
        data = Scene(scene_number=1, heading="X", source_offset=10).model_dump(by_alias=True)

        assert {"sceneNumber", "plotSummary", "timeOfDay", "pageStart", "pageEnd"} <= set(data)
        assert "sourceOffset" not in data
        assert "source_offset" not in data


class TestScriptAnalysisResult:
    def test_numbering_must_be_contiguous(self):
        with pytest.raises(ValidationError):
            ScriptAnalysisResult(scenes=[_scene(1, "A"), _scene(3, "B")])

    def test_numbering_must_start_at_one(self):
        with pytest.raises(ValidationError):
            ScriptAnalysisResult(scenes=[_scene(2, "A")])

    def test_json_output(self):
        result = ScriptAnalysisResult(
            title="T", scenes=[_scene(1, "A", duration=2), _scene(2, "B")]
        )

        data = json.loads(result.model_dump_json(by_alias=True))

        assert data["totalScenes"] == 2
        assert data["estimatedDuration"] == 3
        assert data["scenes"][1]["sceneNumber"] == 2

    def test_segmentation_method_values(self):
        assert SegmentationMethod("model") is SegmentationMethod.MODEL
        assert SegmentationMethod.PARAGRAPH.value == "paragraph"
