"""Pre-OCR Infrastructure: pixel filters."""

from .filters import (
    compute_upscaled_size,
    apply_upscale,
    apply_grayscale,
    to_three_channel,
    calculate_mean_luminance,
    apply_polarity_correction,
    apply_histogram_stretch,
    apply_contrast_boost,
    apply_sharpen,
    build_integral_image,
    calculate_local_means,
    apply_adaptive_threshold,
)

__all__ = [
    "compute_upscaled_size",
    "apply_upscale",
    "apply_grayscale",
    "to_three_channel",
    "calculate_mean_luminance",
    "apply_polarity_correction",
    "apply_histogram_stretch",
    "apply_contrast_boost",
    "apply_sharpen",
    "build_integral_image",
    "calculate_local_means",
    "apply_adaptive_threshold",
]
