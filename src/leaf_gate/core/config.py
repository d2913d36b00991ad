"""Application configuration."""

from dataclasses import dataclass


@dataclass
class ValidationConfig:
    """Thresholds for the leaf admission gate."""

    # Decoding
    max_dimension: int = 256

    # Size/shape guards
    min_total_pixels: int = 8000
    max_aspect_ratio: float = 7.0

    # Greenish/yellowish HSV band
    hue_min_deg: float = 45.0
    hue_max_deg: float = 160.0
    min_saturation: float = 0.18
    min_value: float = 0.12

    # Content guards
    min_green_ratio: float = 0.18
    max_green_ratio: float = 0.995
    min_component_ratio: float = 0.12

    # Soft rules
    uniform_std: float = 6.0
    min_palette_bins: int = 32
    pixels_per_palette_bin: int = 3000
    top_palette_bins: int = 5
    max_top_share: float = 0.70
    min_hue_std: float = 0.02
    edge_threshold: float = 10.0
    min_edge_density: float = 0.015
    max_edge_density: float = 0.60
    flat_edge_density: float = 0.01
    min_score: int = 3

    # Language of user-facing rejection messages ("id" or "en")
    locale: str = "id"


MAX_FILE_SIZE = 8 * 1024 * 1024  # 8MB
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/png", "image/webp", "image/bmp", "image/tiff"}
