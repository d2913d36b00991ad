"""Guard conditions and soft scoring that turn features into a verdict."""

from dataclasses import dataclass
from enum import Enum
import logging

from leaf_gate.core.config import ValidationConfig
from .components import ComponentLabelingResult
from .features import ColorFeatures

logger = logging.getLogger(__name__)


class RejectionReason(str, Enum):
    """Catalogue of rejection categories."""

    IMAGE_TOO_SMALL = "image_too_small"
    ASPECT_RATIO_EXTREME = "aspect_ratio_extreme"
    LEAF_AREA_TOO_SMALL = "leaf_area_too_small"
    LEAF_FRAGMENTED = "leaf_fragmented"
    SINGLE_COLOR_DOMINANT = "single_color_dominant"
    COLOR_TOO_UNIFORM = "color_too_uniform"
    PALETTE_TOO_LIMITED = "palette_too_limited"
    TOO_MANY_HARD_EDGES = "too_many_hard_edges"
    TEXTURE_TOO_FLAT = "texture_too_flat"
    NO_LEAF_CHARACTERISTICS = "no_leaf_characteristics"
    VALIDATION_FAILED = "validation_failed"


DEFAULT_LOCALE = "id"

REASON_MESSAGES: dict[str, dict[RejectionReason, str]] = {
    "id": {
        RejectionReason.IMAGE_TOO_SMALL: "Gambar terlalu kecil untuk dianalisis.",
        RejectionReason.ASPECT_RATIO_EXTREME: "Rasio gambar terlalu ekstrem (tidak wajar).",
        RejectionReason.LEAF_AREA_TOO_SMALL: "Area daun terlalu kecil/Objek bukan daun.",
        RejectionReason.LEAF_FRAGMENTED: "Objek daun terlalu kecil/tersebar (bukan satu daun utama).",
        RejectionReason.SINGLE_COLOR_DOMINANT: (
            "Gambar terlalu dominan satu warna (kemungkinan latar/ilustrasi)."
        ),
        RejectionReason.COLOR_TOO_UNIFORM: "Gambar terlalu seragam seperti ilustrasi/solid color.",
        RejectionReason.PALETTE_TOO_LIMITED: "Palet warna sangat terbatas seperti ikon/ilustrasi.",
        RejectionReason.TOO_MANY_HARD_EDGES: "Terlalu banyak garis tegas seperti ikon/teks.",
        RejectionReason.TEXTURE_TOO_FLAT: "Tekstur daun tidak terdeteksi (terlalu datar).",
        RejectionReason.NO_LEAF_CHARACTERISTICS: "Gambar tidak menunjukkan ciri daun tanaman yang jelas.",
        RejectionReason.VALIDATION_FAILED: "Gagal memvalidasi gambar.",
    },
    "en": {
        RejectionReason.IMAGE_TOO_SMALL: "Image is too small to analyze.",
        RejectionReason.ASPECT_RATIO_EXTREME: "Image aspect ratio is too extreme.",
        RejectionReason.LEAF_AREA_TOO_SMALL: "Leaf area is too small or the object is not a leaf.",
        RejectionReason.LEAF_FRAGMENTED: (
            "Green object is too small or fragmented (no single dominant leaf)."
        ),
        RejectionReason.SINGLE_COLOR_DOMINANT: (
            "Image is dominated by a single color (likely background or illustration)."
        ),
        RejectionReason.COLOR_TOO_UNIFORM: "Image color is too uniform, like an illustration or solid color.",
        RejectionReason.PALETTE_TOO_LIMITED: "Color palette is very limited, like an icon or illustration.",
        RejectionReason.TOO_MANY_HARD_EDGES: "Too many hard edges, like an icon or text.",
        RejectionReason.TEXTURE_TOO_FLAT: "No leaf texture detected (too flat).",
        RejectionReason.NO_LEAF_CHARACTERISTICS: "Image does not show clear plant leaf characteristics.",
        RejectionReason.VALIDATION_FAILED: "Failed to validate image.",
    },
}


def reason_message(reason: RejectionReason, locale: str = DEFAULT_LOCALE) -> str:
    """User-facing text for a rejection reason; unknown locales fall back to the default."""
    messages = REASON_MESSAGES.get(locale, REASON_MESSAGES[DEFAULT_LOCALE])
    return messages[reason]


@dataclass(frozen=True)
class ValidationVerdict:
    """Outcome of validating one image."""

    valid: bool
    reason: str | None = None
    code: RejectionReason | None = None

    @classmethod
    def accept(cls) -> "ValidationVerdict":
        return cls(valid=True)

    @classmethod
    def reject(cls, code: RejectionReason, reason: str) -> "ValidationVerdict":
        return cls(valid=False, reason=reason, code=code)


@dataclass
class SoftScore:
    """The five independent leaf signals; each is worth one point."""

    green_coverage: bool
    color_variation: bool
    edge_range: bool
    hue_variation: bool
    palette_spread: bool

    @property
    def total(self) -> int:
        return sum(
            (
                self.green_coverage,
                self.color_variation,
                self.edge_range,
                self.hue_variation,
                self.palette_spread,
            )
        )


class DecisionEngine:
    """Applies hard guards, then a majority vote over soft signals."""

    def __init__(self, config: ValidationConfig | None = None):
        self.config = config or ValidationConfig()

    def reject(self, code: RejectionReason) -> ValidationVerdict:
        return ValidationVerdict.reject(code, reason_message(code, self.config.locale))

    def check_dimensions(self, width: int, height: int) -> RejectionReason | None:
        """Image-level guards, evaluated before any feature is computed."""
        if width * height < self.config.min_total_pixels:
            return RejectionReason.IMAGE_TOO_SMALL

        aspect = max(width, height) / max(1, min(width, height))
        if aspect > self.config.max_aspect_ratio:
            return RejectionReason.ASPECT_RATIO_EXTREME

        return None

    def check_content(
        self, features: ColorFeatures, components: ComponentLabelingResult
    ) -> RejectionReason | None:
        """Mandatory guards: a dominant greenish object of meaningful size."""
        if features.green_ratio < self.config.min_green_ratio:
            return RejectionReason.LEAF_AREA_TOO_SMALL
        if components.largest_component_ratio < self.config.min_component_ratio:
            return RejectionReason.LEAF_FRAGMENTED
        if features.green_ratio > self.config.max_green_ratio:
            return RejectionReason.SINGLE_COLOR_DOMINANT
        return None

    def score(self, features: ColorFeatures) -> SoftScore:
        """Evaluate the soft signals. Only meaningful once the content guards passed."""
        cfg = self.config
        edge_density = features.edge_density

        return SoftScore(
            # Guaranteed by the green-ratio guard
            green_coverage=True,
            color_variation=not features.is_very_uniform or not features.palette_too_small,
            edge_range=(
                edge_density == 0
                or cfg.min_edge_density <= edge_density <= cfg.max_edge_density
            ),
            # Unmeasured hue variation counts in favour of acceptance
            hue_variation=features.hue_std_too_low is None or not features.hue_std_too_low,
            palette_spread=features.top_share <= cfg.max_top_share,
        )

    def decide(
        self, features: ColorFeatures, components: ComponentLabelingResult
    ) -> ValidationVerdict:
        """
        Combine content guards and soft scoring into a verdict.

        Args:
            features: Extracted colour/texture features
            components: Largest green region of the mask

        Returns:
            ValidationVerdict; rejections carry the most specific reason
        """
        guard = self.check_content(features, components)
        if guard is not None:
            logger.info("Rejected by content guard: %s", guard.value)
            return self.reject(guard)

        score = self.score(features)
        logger.debug("Soft score %d/5: %s", score.total, score)
        if score.total >= self.config.min_score:
            return ValidationVerdict.accept()

        reason = self._most_specific_reason(features, components)
        logger.info("Rejected by soft score %d: %s", score.total, reason.value)
        return self.reject(reason)

    def _most_specific_reason(
        self, features: ColorFeatures, components: ComponentLabelingResult
    ) -> RejectionReason:
        cfg = self.config
        if components.largest_component_ratio < cfg.min_component_ratio:
            return RejectionReason.LEAF_FRAGMENTED
        if features.is_very_uniform:
            return RejectionReason.COLOR_TOO_UNIFORM
        if features.palette_too_small or features.top_share > cfg.max_top_share:
            return RejectionReason.PALETTE_TOO_LIMITED
        if features.edge_density > cfg.max_edge_density:
            return RejectionReason.TOO_MANY_HARD_EDGES
        if features.edge_density < cfg.flat_edge_density:
            return RejectionReason.TEXTURE_TOO_FLAT
        return RejectionReason.NO_LEAF_CHARACTERISTICS
