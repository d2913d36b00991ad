"""Colour and texture feature extraction from an RGB pixel grid."""

from dataclasses import dataclass
import logging

import cv2
import numpy as np

from leaf_gate.core.config import ValidationConfig

logger = logging.getLogger(__name__)

PALETTE_BINS = 4096  # 4 bits per channel


def rgb_to_hsv(grid: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Exact HSV of an RGB uint8 grid.

    Returns hue in degrees [0, 360) (0 where max == min), saturation and
    value in [0, 1]. Hue is computed as ``60 * diff / delta + offset`` on
    integer-valued float64 channels, so hues that are whole degrees come out
    exact and inclusive band limits hold.
    """
    channels = grid.astype(np.float64)
    r, g, b = channels[..., 0], channels[..., 1], channels[..., 2]

    c_max = channels.max(axis=-1)
    c_min = channels.min(axis=-1)
    delta = c_max - c_min
    safe_delta = np.where(delta > 0, delta, 1.0)

    hue = np.where(
        c_max == r,
        60.0 * (g - b) / safe_delta + np.where(g < b, 360.0, 0.0),
        np.where(
            c_max == g,
            60.0 * (b - r) / safe_delta + 120.0,
            60.0 * (r - g) / safe_delta + 240.0,
        ),
    )
    hue = np.where(delta > 0, hue, 0.0)

    sat = np.where(c_max > 0, delta / np.where(c_max > 0, c_max, 1.0), 0.0)
    val = c_max / 255.0
    return hue, sat, val


@dataclass
class ColorFeatures:
    """Per-pixel buffers and aggregate statistics for one image."""

    width: int
    height: int
    gray: np.ndarray
    green_mask: np.ndarray
    channel_means: tuple[float, float, float]
    channel_stds: tuple[float, float, float]
    green_ratio: float
    green_hues: np.ndarray
    palette: dict[int, int]
    top_share: float
    is_very_uniform: bool
    unique_bins: int
    min_expected_bins: int
    palette_too_small: bool
    hue_std: float | None
    hue_std_too_low: bool | None
    edge_density: float

    @property
    def total_pixels(self) -> int:
        return self.width * self.height


class FeatureExtractor:
    """Computes greenness, palette, uniformity and texture signals."""

    def __init__(self, config: ValidationConfig | None = None):
        self.config = config or ValidationConfig()

    def extract(self, grid: np.ndarray) -> ColorFeatures:
        """
        Extract features from an RGB grid.

        Args:
            grid: uint8 array of shape (height, width, 3), RGB order

        Returns:
            ColorFeatures for the grid
        """
        height, width = grid.shape[:2]
        total = width * height
        rgb = grid.astype(np.float32)

        # BT.601 luma
        gray = cv2.cvtColor(rgb, cv2.COLOR_RGB2GRAY)

        palette, top_share = self._palette(grid, total)

        means, stds = self._channel_moments(grid, total)
        is_very_uniform = all(s < self.config.uniform_std for s in stds)

        hue_deg, sat, val = rgb_to_hsv(grid)
        green_mask = (
            (hue_deg >= self.config.hue_min_deg)
            & (hue_deg <= self.config.hue_max_deg)
            & (sat >= self.config.min_saturation)
            & (val >= self.config.min_value)
        )
        green_count = int(np.count_nonzero(green_mask))
        green_hues = hue_deg[green_mask].astype(np.float64) / 360.0

        hue_std = None
        hue_std_too_low = None
        if green_hues.size > 0:
            hue_std = float(np.std(green_hues))
            hue_std_too_low = hue_std < self.config.min_hue_std

        unique_bins = len(palette)
        min_expected_bins = max(self.config.min_palette_bins, total // self.config.pixels_per_palette_bin)

        features = ColorFeatures(
            width=width,
            height=height,
            gray=gray,
            green_mask=green_mask,
            channel_means=means,
            channel_stds=stds,
            green_ratio=green_count / total,
            green_hues=green_hues,
            palette=palette,
            top_share=top_share,
            is_very_uniform=is_very_uniform,
            unique_bins=unique_bins,
            min_expected_bins=min_expected_bins,
            palette_too_small=unique_bins < min_expected_bins,
            hue_std=hue_std,
            hue_std_too_low=hue_std_too_low,
            edge_density=self._edge_density(gray, green_mask),
        )

        logger.debug(
            "Features: green_ratio=%.3f bins=%d top_share=%.3f stds=%s hue_std=%s edge_density=%.3f",
            features.green_ratio,
            unique_bins,
            top_share,
            tuple(round(s, 2) for s in stds),
            None if hue_std is None else round(hue_std, 4),
            features.edge_density,
        )
        return features

    def _palette(self, grid: np.ndarray, total: int) -> tuple[dict[int, int], float]:
        """Histogram of 12-bit colour codes and share of the most frequent bins."""
        quantized = (grid >> 4).astype(np.uint16)
        codes = (quantized[..., 0] << 8) | (quantized[..., 1] << 4) | quantized[..., 2]
        counts = np.bincount(codes.ravel(), minlength=PALETTE_BINS)

        occupied = np.flatnonzero(counts)
        palette = dict(zip(occupied.tolist(), counts[occupied].tolist()))

        top = np.sort(counts)[::-1][: self.config.top_palette_bins]
        return palette, float(top.sum()) / total

    def _channel_moments(
        self, grid: np.ndarray, total: int
    ) -> tuple[tuple[float, float, float], tuple[float, float, float]]:
        """Population mean and standard deviation of R, G and B."""
        samples = grid.reshape(-1, 3).astype(np.float64)
        sums = samples.sum(axis=0)
        squares = (samples * samples).sum(axis=0)

        means = sums / total
        stds = np.sqrt(np.maximum(0.0, squares / total - means * means))
        return tuple(float(m) for m in means), tuple(float(s) for s in stds)

    def _edge_density(self, gray: np.ndarray, green_mask: np.ndarray) -> float:
        """Share of interior masked pixels whose gradient magnitude exceeds the edge threshold."""
        # The 1-pixel border is excluded
        interior = green_mask[1:-1, 1:-1]
        interior_count = int(np.count_nonzero(interior))
        if interior_count == 0:
            return 0.0

        center = gray[1:-1, 1:-1]
        magnitude = (
            np.abs(gray[1:-1, 2:] - center)
            + np.abs(center - gray[1:-1, :-2])
            + np.abs(gray[2:, 1:-1] - center)
            + np.abs(center - gray[:-2, 1:-1])
        )
        edge_count = int(np.count_nonzero((magnitude > self.config.edge_threshold) & interior))
        return edge_count / interior_count
