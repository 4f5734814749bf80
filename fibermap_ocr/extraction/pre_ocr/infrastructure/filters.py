"""
Pre-OCR Infrastructure: pixel filters for cable-label images.

Low-level utilities, one function per pipeline stage. Every function returns a
new array and leaves its input untouched. After grayscale conversion the
filters work on 2-D luminance planes (H, W) of uint8.
"""

import math
from typing import Tuple

import cv2
import numpy as np
import numpy.typing as npt


# ITU-R BT.709 luminance weights, in OpenCV's B, G, R channel order
BT709_WEIGHTS_BGR = np.array([0.0722, 0.7152, 0.2126], dtype=np.float64)

SHARPEN_KERNEL = np.array([[0, -1, 0],
                           [-1, 5, -1],
                           [0, -1, 0]], dtype=np.float32)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _to_uint8(values: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Rounds to nearest and clamps into [0, 255]."""
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def compute_upscaled_size(width: int, height: int, min_width: int) -> Tuple[int, int]:
    """
    Target size for upscaling.

    Images at least ``min_width`` wide keep their size; narrower ones are
    scaled uniformly by ``min_width / width``.

    Returns:
        (width, height)
    """
    if width >= min_width:
        return width, height
    scale = min_width / width
    return _round_half_up(width * scale), max(1, _round_half_up(height * scale))


def apply_upscale(image: npt.NDArray[np.uint8], min_width: int) -> npt.NDArray[np.uint8]:
    """Upscales images narrower than ``min_width`` (bicubic)."""
    height, width = image.shape[:2]
    target_w, target_h = compute_upscaled_size(width, height, min_width)
    if (target_w, target_h) == (width, height):
        return image.copy()
    return cv2.resize(image, (target_w, target_h), interpolation=cv2.INTER_CUBIC)  # type: ignore[return-value]


def apply_grayscale(image: npt.NDArray[np.uint8]) -> npt.NDArray[np.uint8]:
    """
    Converts a BGR/BGRA image into a BT.709 luminance plane.

    cv2.cvtColor uses BT.601 weights, which render printed label text with
    less stroke/background separation, so the weights are applied directly.

    Args:
        image: (H, W), (H, W, 3) BGR or (H, W, 4) BGRA

    Returns:
        (H, W) uint8 luminance
    """
    if image.ndim == 2:
        return image.copy()
    luminance = image[..., :3].astype(np.float64) @ BT709_WEIGHTS_BGR
    return _to_uint8(luminance)


def to_three_channel(plane: npt.NDArray[np.uint8]) -> npt.NDArray[np.uint8]:
    """Expands a luminance plane back into a 3-channel image with R=G=B."""
    return cv2.cvtColor(plane, cv2.COLOR_GRAY2BGR)  # type: ignore[return-value]


def calculate_mean_luminance(plane: npt.NDArray[np.uint8]) -> float:
    return float(plane.mean())


def apply_polarity_correction(
    plane: npt.NDArray[np.uint8],
    threshold: float = 128
) -> Tuple[npt.NDArray[np.uint8], bool]:
    """
    Inverts dark-dominant images so text ends up dark on a light background.

    Returns:
        (plane, inverted)
    """
    if calculate_mean_luminance(plane) < threshold:
        return (255 - plane).astype(np.uint8), True
    return plane.copy(), False


def apply_histogram_stretch(plane: npt.NDArray[np.uint8]) -> Tuple[npt.NDArray[np.uint8], Tuple[int, int]]:
    """
    Auto-contrast: maps the darkest value to 0 and the brightest to 255.

    Values are rounded half up. A flat image (min == max) comes back unchanged.

    Returns:
        (plane, (min, max) of the input)
    """
    lo = int(plane.min())
    hi = int(plane.max())
    if lo == hi:
        return plane.copy(), (lo, hi)
    stretched = (plane.astype(np.float64) - lo) / (hi - lo) * 255.0
    rounded = np.clip(np.floor(stretched + 0.5), 0, 255).astype(np.uint8)
    return rounded, (lo, hi)


def apply_contrast_boost(plane: npt.NDArray[np.uint8], factor: float) -> npt.NDArray[np.uint8]:
    """
    Linear contrast around mid-gray: v' = clamp(v * factor + 128 * (1 - factor)).

    Factor > 1 increases contrast, < 1 decreases it, 1 is a no-op.
    """
    if factor == 1:
        return plane.copy()
    boosted = plane.astype(np.float64) * factor + 128.0 * (1.0 - factor)
    return _to_uint8(boosted)


def apply_sharpen(plane: npt.NDArray[np.uint8]) -> npt.NDArray[np.uint8]:
    """
    3x3 sharpening convolution.

    Every output pixel is computed from the unsharpened input; the outermost
    1px ring is copied through unchanged.
    """
    result = plane.copy()
    height, width = plane.shape[:2]
    if height < 3 or width < 3:
        return result

    filtered = cv2.filter2D(plane.astype(np.float32), -1, SHARPEN_KERNEL)
    result[1:-1, 1:-1] = _to_uint8(filtered[1:-1, 1:-1])
    return result


def build_integral_image(plane: npt.NDArray[np.uint8]) -> npt.NDArray[np.float64]:
    """
    Summed-area table with a zero top row and left column.

    ``integral[y, x]`` is the sum of ``plane[:y, :x]``, shape (H + 1, W + 1).
    Float64 so multi-megapixel sums cannot overflow.
    """
    return cv2.integral(plane, sdepth=cv2.CV_64F)  # type: ignore[return-value]


def calculate_local_means(plane: npt.NDArray[np.uint8], block_size: int) -> npt.NDArray[np.float64]:
    """
    Mean of the ``block_size x block_size`` window centred on every pixel.

    Windows are clipped at the image edges, so border pixels average over
    fewer samples. Each mean is four integral-image lookups.
    """
    height, width = plane.shape[:2]
    half = block_size // 2
    integral = build_integral_image(plane)

    rows = np.arange(height)
    cols = np.arange(width)
    y0 = np.maximum(rows - half, 0)
    y1 = np.minimum(rows + half, height - 1) + 1
    x0 = np.maximum(cols - half, 0)
    x1 = np.minimum(cols + half, width - 1) + 1

    window_sums = (
        integral[np.ix_(y1, x1)]
        - integral[np.ix_(y0, x1)]
        - integral[np.ix_(y1, x0)]
        + integral[np.ix_(y0, x0)]
    )
    counts = np.outer(y1 - y0, x1 - x0)
    return window_sums / counts


def apply_adaptive_threshold(
    plane: npt.NDArray[np.uint8],
    block_size: int = 15,
    constant: float = 10
) -> npt.NDArray[np.uint8]:
    """
    Binarizes against the local mean.

    A pixel darker than ``local_mean - constant`` becomes black (0), anything
    else white (255). Copes with uneven lighting across a label far better
    than a single global cutoff.
    """
    local_means = calculate_local_means(plane, block_size)
    return np.where(plane < local_means - constant, 0, 255).astype(np.uint8)
