"""Create synthetic test images for pipeline testing."""

import cv2
import numpy as np

# HSV(100 deg, 0.5, 0.5)
LEAF_GREEN = (85, 128, 64)
# Reddish-brown background, hue ~12 deg
SOIL_BROWN = (180, 100, 80)


def encode_png(rgb: np.ndarray) -> bytes:
    """Encode an RGB uint8 array as lossless PNG bytes."""
    ok, buffer = cv2.imencode(".png", cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR))
    assert ok
    return buffer.tobytes()


def solid_image(width: int, height: int, color: tuple[int, int, int]) -> np.ndarray:
    """Single RGB value repeated over the whole grid."""
    img = np.zeros((height, width, 3), dtype=np.uint8)
    img[:, :] = color
    return img


def leaf_square_image(
    size: int = 160,
    coverage: float = 0.6,
    noise_sigma: float = 10.0,
    seed: int = 0,
    leaf_color: tuple[int, int, int] = LEAF_GREEN,
    background: tuple[int, int, int] = SOIL_BROWN,
) -> np.ndarray:
    """Centered green square covering ``coverage`` of the image, with Gaussian noise."""
    img = solid_image(size, size, background).astype(np.float64)

    side = int(round(size * coverage**0.5))
    top = (size - side) // 2
    img[top : top + side, top : top + side] = leaf_color

    if noise_sigma > 0:
        rng = np.random.default_rng(seed)
        img += rng.normal(0.0, noise_sigma, img.shape)

    return np.clip(np.rint(img), 0, 255).astype(np.uint8)


def checkerboard_image(
    size: int = 256,
    tile: int = 16,
    first: tuple[int, int, int] = (255, 0, 0),
    second: tuple[int, int, int] = (0, 0, 255),
) -> np.ndarray:
    """Two-colour checkerboard."""
    ys, xs = np.indices((size, size))
    use_first = ((ys // tile) + (xs // tile)) % 2 == 0
    img = np.empty((size, size, 3), dtype=np.uint8)
    img[use_first] = first
    img[~use_first] = second
    return img


def two_blob_mask() -> np.ndarray:
    """1000-pixel mask with disjoint blobs of 100 and 400 pixels."""
    mask = np.zeros((25, 40), dtype=bool)
    mask[1:11, 1:11] = True  # 10 x 10
    mask[2:22, 15:35] = True  # 20 x 20
    return mask


if __name__ == "__main__":
    with open("test_leaf.png", "wb") as f:
        f.write(encode_png(leaf_square_image()))
    print("Created test image at: test_leaf.png")
