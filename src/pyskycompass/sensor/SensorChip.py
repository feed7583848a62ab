"""Sensor chip model for quantization and noise effects."""

from typing import Optional

from numpy.typing import NDArray
from numpy.random import Generator, default_rng
from numpy import float64, nanmax, minimum, maximum, floor, nan_to_num, isnan, zeros, uint8, uint16, isfinite


class SensorChip:
    """Simulate sensor quantization with noise and saturation effects."""

    __adc_resolution: int
    __signal_to_noise_ratio: Optional[float]
    __pixel_saturation_ratio: float
    __rng: Generator

    def __init__(
            self,
            pixel_saturation_ratio: float = 1.0,
            adc_resolution: int = 8,
            signal_to_noise_ratio: Optional[float] = None,
            random_seed: Optional[int] = None
    ) -> None:
        """Initialize the sensor chip configuration.

        Args:
            pixel_saturation_ratio: Ratio of max intensity used before saturation.
            adc_resolution: ADC resolution in bits, at most 16.
            signal_to_noise_ratio: Desired signal-to-noise ratio, or None for a noiseless chip.
            random_seed: Optional seed for deterministic noise.
        """
        if not 1 <= adc_resolution <= 16:
            raise ValueError(f'ADC resolution must lie in [1, 16] bits, got {adc_resolution}')
        if pixel_saturation_ratio <= 0:
            raise ValueError(f'Pixel saturation ratio must be positive, got {pixel_saturation_ratio}')
        if signal_to_noise_ratio is not None and signal_to_noise_ratio <= 0:
            raise ValueError(f'Signal-to-noise ratio must be positive, got {signal_to_noise_ratio}')
        self.__adc_resolution = int(adc_resolution)
        self.__pixel_saturation_ratio = pixel_saturation_ratio
        self.__signal_to_noise_ratio = signal_to_noise_ratio
        self.__rng = default_rng(random_seed)

    @property
    def adc_resolution(self) -> int:
        return self.__adc_resolution

    def get_bits_intensity(
            self,
            intensity_on_pixel: NDArray[float64],
    ) -> NDArray:
        """Convert intensity on pixels into quantized sensor readings.

        Args:
            intensity_on_pixel: Incoming intensity for each raw sample; NaN reads as dark.

        Returns:
            Quantized samples, uint8 for resolutions up to 8 bits and uint16 otherwise.
        """
        dtype = uint8 if self.__adc_resolution <= 8 else uint16
        mask = isnan(intensity_on_pixel)
        if mask.all():
            return zeros(intensity_on_pixel.shape, dtype=dtype)

        signal: NDArray[float64] = nan_to_num(intensity_on_pixel, nan=0.0)
        if self.__signal_to_noise_ratio is not None:
            signal = signal + (1 / self.__signal_to_noise_ratio) * signal * self.__rng.standard_normal(signal.shape)

        max_pixel_value = 2 ** self.__adc_resolution - 1
        max_incoming_intensity = nanmax(intensity_on_pixel)
        if not isfinite(max_incoming_intensity) or max_incoming_intensity <= 0:
            return zeros(intensity_on_pixel.shape, dtype=dtype)

        bits_intensity = minimum(
            maximum(
                floor((max_pixel_value / (max_incoming_intensity * self.__pixel_saturation_ratio)) * signal),
                0
            ),
            max_pixel_value
        ).astype(dtype)
        bits_intensity[mask] = 0

        return bits_intensity
