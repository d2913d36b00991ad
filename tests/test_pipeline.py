"""End-to-end tests for the validation pipeline on synthetic images."""

import cv2
import pytest

from create_test_image import (
    checkerboard_image,
    encode_png,
    leaf_square_image,
    solid_image,
)
from leaf_gate.core.config import ValidationConfig
from leaf_gate.processing.decision import RejectionReason, ValidationVerdict
from leaf_gate.processing.pipeline import LeafValidationPipeline, validate


@pytest.fixture
def pipeline():
    return LeafValidationPipeline()


def test_noisy_leaf_square_is_accepted(pipeline):
    verdict = pipeline.validate(encode_png(leaf_square_image(size=160, coverage=0.6)))

    assert verdict == ValidationVerdict(valid=True)


def test_larger_leaf_photo_is_downscaled_and_accepted(pipeline):
    report = pipeline.analyze(encode_png(leaf_square_image(size=512, coverage=0.6, seed=3)))

    assert report.verdict.valid
    assert (report.metrics["width"], report.metrics["height"]) == (256, 256)
    assert report.metrics["green_ratio"] == pytest.approx(0.6, abs=0.03)
    assert report.metrics["largest_component_ratio"] == pytest.approx(0.6, abs=0.03)


@pytest.mark.parametrize(
    "image",
    [
        solid_image(80, 80, (60, 160, 60)),
        solid_image(200, 39, (60, 160, 60)),
        leaf_square_image(size=85),
        checkerboard_image(size=64, tile=8),
    ],
)
def test_small_images_are_always_rejected(pipeline, image):
    verdict = pipeline.validate(encode_png(image))

    assert not verdict.valid
    assert verdict.code is RejectionReason.IMAGE_TOO_SMALL


@pytest.mark.parametrize("color", [(255, 0, 0), (0, 0, 255), (200, 30, 30)])
def test_images_without_green_are_rejected(pipeline, color):
    report = pipeline.analyze(encode_png(solid_image(200, 200, color)))

    assert not report.verdict.valid
    assert report.verdict.code is RejectionReason.LEAF_AREA_TOO_SMALL
    assert report.metrics["green_ratio"] == 0.0
    assert report.metrics["largest_component_ratio"] == 0.0


def test_solid_green_is_rejected_as_single_color(pipeline):
    verdict = pipeline.validate(encode_png(solid_image(300, 300, (60, 160, 60))))

    assert not verdict.valid
    assert verdict.code is RejectionReason.SINGLE_COLOR_DOMINANT
    assert verdict.reason == "Gambar terlalu dominan satu warna (kemungkinan latar/ilustrasi)."


def test_red_blue_checkerboard_is_rejected_for_missing_leaf_area(pipeline):
    verdict = pipeline.validate(encode_png(checkerboard_image(size=256, tile=16)))

    assert not verdict.valid
    assert verdict.code is RejectionReason.LEAF_AREA_TOO_SMALL


def test_scattered_green_is_rejected_as_fragmented(pipeline):
    # Green tiles of 8x8 (64 of 25600 pixels each) cover half the image
    image = checkerboard_image(size=160, tile=8, first=(60, 160, 60), second=(255, 0, 0))
    verdict = pipeline.validate(encode_png(image))

    assert verdict.code is RejectionReason.LEAF_FRAGMENTED


def test_extreme_aspect_ratio_is_rejected(pipeline):
    verdict = pipeline.validate(encode_png(solid_image(10, 2000, (60, 160, 60))))
    assert not verdict.valid

    # 256 x 36: large enough, but wider than 7:1
    wide = pipeline.validate(encode_png(leaf_square_image(size=256)[:36, :]))
    assert wide.code is RejectionReason.ASPECT_RATIO_EXTREME


def test_validation_is_idempotent(pipeline):
    data = encode_png(leaf_square_image(seed=7))

    assert pipeline.validate(data) == pipeline.validate(data)
    assert validate(data) == validate(data)


def test_dimension_guard_skips_feature_extraction(pipeline, monkeypatch):
    calls = []
    monkeypatch.setattr(pipeline.extractor, "extract", lambda grid: calls.append(grid))

    verdict = pipeline.validate(encode_png(solid_image(50, 50, (60, 160, 60))))

    assert verdict.code is RejectionReason.IMAGE_TOO_SMALL
    assert calls == []


def test_content_guard_skips_soft_scoring(pipeline, monkeypatch):
    calls = []
    monkeypatch.setattr(pipeline.engine, "score", lambda features: calls.append(features))

    verdict = pipeline.validate(encode_png(solid_image(300, 300, (60, 160, 60))))

    assert verdict.code is RejectionReason.SINGLE_COLOR_DOMINANT
    assert calls == []


def test_undecodable_bytes_become_rejection(pipeline):
    verdict = pipeline.validate(b"\x89PNG\r\n\x1a\n truncated")

    assert not verdict.valid
    assert verdict.code is RejectionReason.VALIDATION_FAILED
    assert verdict.reason == "Could not decode image data"


def test_empty_bytes_become_rejection(pipeline):
    verdict = pipeline.validate(b"")

    assert not verdict.valid
    assert verdict.reason == "Image data is empty"


def test_unexpected_errors_become_rejection(pipeline, monkeypatch):
    def explode(mask):
        raise RuntimeError("labeler crashed")

    monkeypatch.setattr(pipeline.labeler, "label", explode)

    verdict = pipeline.validate(encode_png(leaf_square_image()))

    assert verdict == ValidationVerdict(
        valid=False, reason="labeler crashed", code=RejectionReason.VALIDATION_FAILED
    )


def test_fault_without_message_uses_localized_fallback(monkeypatch):
    pipeline = LeafValidationPipeline(ValidationConfig(locale="en"))

    def explode(grid):
        raise RuntimeError()

    monkeypatch.setattr(pipeline.extractor, "extract", explode)

    verdict = pipeline.validate(encode_png(leaf_square_image()))
    assert verdict.reason == "Failed to validate image."


def test_jpeg_input_is_supported(pipeline):
    ok, buffer = cv2.imencode(".jpg", cv2.cvtColor(solid_image(200, 200, (0, 0, 255)), cv2.COLOR_RGB2BGR))
    assert ok

    report = pipeline.analyze(buffer.tobytes())

    assert report.metrics["width"] == 200
    assert report.verdict.code is RejectionReason.LEAF_AREA_TOO_SMALL


def test_report_includes_processing_time(pipeline):
    report = pipeline.analyze(encode_png(leaf_square_image()))
    assert report.processing_time_ms >= 0
    assert report.metrics["component_count"] >= 1
