"""Main validation pipeline orchestration."""

from dataclasses import dataclass, field
import logging
import time

from leaf_gate.core.config import ValidationConfig
from leaf_gate.core.exceptions import LeafGateError
from .components import ComponentLabeler
from .decision import DecisionEngine, RejectionReason, ValidationVerdict, reason_message
from .decoding import ImageDecoder
from .features import FeatureExtractor

logger = logging.getLogger(__name__)


@dataclass
class ValidationReport:
    """Verdict plus the measurements it was based on."""

    verdict: ValidationVerdict
    metrics: dict = field(default_factory=dict)
    processing_time_ms: int = 0


class LeafValidationPipeline:
    """Decides whether image bytes plausibly show a single plant leaf."""

    def __init__(self, config: ValidationConfig | None = None):
        self.config = config or ValidationConfig()
        self.decoder = ImageDecoder(self.config.max_dimension)
        self.extractor = FeatureExtractor(self.config)
        self.labeler = ComponentLabeler()
        self.engine = DecisionEngine(self.config)

    def validate(self, image_bytes: bytes) -> ValidationVerdict:
        """
        Validate an encoded image.

        Never raises: decoding and analysis faults become rejections whose
        reason is the underlying error message.
        """
        return self.analyze(image_bytes).verdict

    def analyze(self, image_bytes: bytes) -> ValidationReport:
        """Run the full pipeline and keep the intermediate measurements."""
        start_time = time.time()
        metrics: dict = {}

        try:
            verdict = self._run(image_bytes, metrics)
        except LeafGateError as e:
            logger.warning("Validation failed (%s): %s", e.code, e.message)
            verdict = self._fault(e)
        except Exception as e:
            logger.exception("Unexpected error while validating image")
            verdict = self._fault(e)

        processing_time_ms = int((time.time() - start_time) * 1000)
        return ValidationReport(verdict=verdict, metrics=metrics, processing_time_ms=processing_time_ms)

    def _run(self, image_bytes: bytes, metrics: dict) -> ValidationVerdict:
        # Step 1: Decode and downscale
        grid = self.decoder.decode(image_bytes)
        height, width = grid.shape[:2]
        metrics.update(width=width, height=height)

        # Step 2: Size/shape guards
        guard = self.engine.check_dimensions(width, height)
        if guard is not None:
            logger.info("Rejected by dimension guard: %s (%dx%d)", guard.value, width, height)
            return self.engine.reject(guard)

        # Step 3: Colour and texture features
        features = self.extractor.extract(grid)

        # Step 4: Largest connected green region
        components = self.labeler.label(features.green_mask)

        metrics.update(
            green_ratio=round(features.green_ratio, 4),
            largest_component_ratio=round(components.largest_component_ratio, 4),
            component_count=components.component_count,
            unique_bins=features.unique_bins,
            top_share=round(features.top_share, 4),
            channel_stds=[round(s, 3) for s in features.channel_stds],
            hue_std=None if features.hue_std is None else round(features.hue_std, 4),
            edge_density=round(features.edge_density, 4),
        )

        # Step 5: Guards and soft scoring
        return self.engine.decide(features, components)

    def _fault(self, error: Exception) -> ValidationVerdict:
        message = str(error) or reason_message(RejectionReason.VALIDATION_FAILED, self.config.locale)
        return ValidationVerdict.reject(RejectionReason.VALIDATION_FAILED, message)


def validate(image_bytes: bytes, config: ValidationConfig | None = None) -> ValidationVerdict:
    """Validate image bytes with a fresh pipeline."""
    return LeafValidationPipeline(config).validate(image_bytes)
