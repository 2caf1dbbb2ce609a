"""Spectra, periodograms and waveform measurements of sampled channels."""

from __future__ import annotations

import cmath
import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Iterator, Sequence

Samples = Sequence[tuple[float, float]]


class FFTType(IntEnum):
    SPECTRUM = 0
    PERIODOGRAM = 1
    PWELCH = 2


class FFTWindow(IntEnum):
    RECTANGULAR = 0
    HAMMING = 1
    HANN = 2
    BLACKMAN = 3


# Coherent gain of each window, used to normalise amplitudes.
_WINDOW_GAIN = {
    FFTWindow.RECTANGULAR: 1.0,
    FFTWindow.HAMMING: 0.54,
    FFTWindow.HANN: 0.5,
    FFTWindow.BLACKMAN: 0.42,
}


@dataclass(frozen=True)
class Measurements:
    """Quantities measured on one waveform."""

    period: float
    frequency: float
    amplitude: float
    minimum: float
    maximum: float
    vrms: float
    dc: float
    sampling_rate: float
    rise_time: float
    fall_time: float
    samples: int


def next_pow2(n: int) -> int:
    """Smallest power of two that is at least ``n`` (and at least 1)."""
    if n <= 1:
        return 1
    return 1 << (n - 1).bit_length()


def _fft(x: list[complex]) -> list[complex]:
    n = len(x)
    if n == 1:
        return list(x)
    even = _fft(x[0::2])
    odd = _fft(x[1::2])
    twiddled = [cmath.rect(1.0, 2.0 * math.pi * k / n) * o for k, o in enumerate(odd)]
    return [e + t for e, t in zip(even, twiddled)] + [e - t for e, t in zip(even, twiddled)]


def fft(x: Iterable[complex]) -> list[complex]:
    """Radix-2 transform ``X[k] = sum x[n] * exp(+2j*pi*k*n/N)``; N must be a power of two."""
    values = [complex(v) for v in x]
    n = len(values)
    if n == 0 or n & (n - 1):
        raise ValueError("FFT length must be a power of two")
    return _fft(values)


def _div(a: float, b: float) -> float:
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def _db(power_ratio: float) -> float:
    if power_ratio > 0.0:
        return 10.0 * math.log10(power_ratio)
    if power_ratio == 0.0:
        return -math.inf
    return math.nan


def _window_coefficients(window: FFTWindow, length: int) -> list[float]:
    step = 2.0 * math.pi / length
    if window is FFTWindow.HAMMING:
        return [0.54 - 0.46 * math.cos(step * n) for n in range(length)]
    if window is FFTWindow.HANN:
        return [0.5 * (1.0 - math.cos(step * n)) for n in range(length)]
    if window is FFTWindow.BLACKMAN:
        return [0.42 - 0.5 * math.cos(step * n) + 0.08 * math.cos(2.0 * step * n) for n in range(length)]
    return [1.0] * length


def _frequency_bins(nfft: int, fs: float, twosided: bool, zerocenter: bool) -> Iterator[tuple[int, float]]:
    step = fs / nfft
    count = nfft if twosided else nfft // 2 + 1
    for i in range(count):
        freq = i * step
        if zerocenter and i > nfft // 2:
            freq -= nfft * step
        yield i, freq


def _as_samples(data: Iterable[tuple[float, float]]) -> list[tuple[float, float]]:
    samples = [(float(k), float(v)) for k, v in data]
    if len(samples) < 2:
        raise ValueError("at least two samples are needed")
    return samples


def _power(c: complex) -> float:
    return c.real * c.real + c.imag * c.imag


class SignalProcessing:
    """Computes spectra and measurements; window tables are cached per length."""

    def __init__(self) -> None:
        self._windows: dict[tuple[FFTWindow, int], list[float]] = {}

    def _window(self, window: FFTWindow, length: int) -> list[float]:
        key = (window, length)
        if key not in self._windows:
            self._windows[key] = _window_coefficients(window, length)
        return self._windows[key]

    def calculate_spectrum(self, data: Iterable[complex], window: FFTWindow, min_nfft: int) -> list[complex]:
        """Apply ``window``, zero-pad to a power of two (at least ``min_nfft``) and transform."""
        values = [complex(v) for v in data]
        window = FFTWindow(window)
        if window is not FFTWindow.RECTANGULAR and values:
            values = [v * w for v, w in zip(values, self._window(window, len(values)))]
        nfft = max(next_pow2(len(values)), min_nfft)
        values.extend([0j] * (nfft - len(values)))
        return fft(values)

    def get_fft_plot(
        self,
        data: Samples,
        fft_type: FFTType,
        window: FFTWindow,
        remove_dc: bool,
        segment_count: int,
        twosided: bool,
        zerocenter: bool,
        min_nfft: int,
    ) -> list[tuple[float, float]]:
        """Return ``(frequency, value)`` points sorted by frequency.

        A spectrum gives amplitudes; a periodogram and Welch's method give dB.
        """
        samples = _as_samples(data)
        fft_type = FFTType(fft_type)
        window = FFTWindow(window)
        keys = [k for k, _ in samples]
        values = [v for _, v in samples]
        if remove_dc:
            dc = sum(values) / len(values)
            values = [v - dc for v in values]

        fs = _div(len(values), keys[-1] - keys[0])
        gain = _WINDOW_GAIN[window]
        result: list[tuple[float, float]] = []

        if fft_type in (FFTType.SPECTRUM, FFTType.PERIODOGRAM):
            normalization = len(values) * gain
            spectrum = self.calculate_spectrum(values, window, min_nfft)
            for i, freq in _frequency_bins(len(spectrum), fs, twosided, zerocenter):
                if fft_type is FFTType.PERIODOGRAM:
                    value = _db(_power(spectrum[i]) / (normalization * normalization))
                else:
                    value = abs(spectrum[i]) / normalization
                result.append((freq, value))
        else:
            if segment_count < 1:
                raise ValueError("segment count must be at least 1")
            half = len(values) // segment_count
            if half == 0:
                raise ValueError("more segments than samples")
            # Segments overlap by half; an even number of halves leaves no room for the last one.
            count = segment_count - 1 if (len(values) // half) % 2 == 0 else segment_count
            last = len(values) - 1
            segments = [
                [values[min(j, last)] for j in range(i * half, (i + 2) * half)] for i in range(count)
            ]
            normalization = 2 * half * gain
            spectra = [self.calculate_spectrum(seg, window, min_nfft) for seg in segments]
            for i, freq in _frequency_bins(len(spectra[0]), fs, twosided, zerocenter):
                total = sum(_power(s[i]) for s in spectra)
                result.append((freq, _db(total / (normalization * normalization) / len(spectra))))

        result.sort(key=lambda point: point[0])
        return result

    def process(self, data: Samples) -> Measurements:
        """Measure frequency, levels, RMS and edge times of a key-sorted waveform."""
        samples = _as_samples(data)
        values = [v for _, v in samples]
        keys = [k for k, _ in samples]
        maximum = max(values)
        minimum = min(values)
        dc_full = sum(values) / len(values)
        fs = _div(len(values) - 1, keys[-1] - keys[0])
        freq = self._strongest_frequency(values, dc_full, fs)
        period = _div(1.0, freq)
        count = len(samples)

        # Keep a whole number of periods, counted back from the last sample.
        ratio = _div(keys[-1] - keys[0], period)
        n_periods = math.floor(ratio) if math.isfinite(ratio) else ratio
        if math.isfinite(n_periods) and n_periods != 0:
            cutoff = keys[-1] - n_periods * period
            samples = [p for p in samples if p[0] >= cutoff]

        dc = sum(v for _, v in samples) / len(samples)
        vrms = math.sqrt(sum(v * v for _, v in samples) / len(samples))

        # Edge times use only the last two periods.
        if math.isfinite(n_periods) and n_periods > 2:
            cutoff = samples[-1][0] - 2.0 * period
            samples = [p for p in samples if p[0] >= cutoff]

        rise, fall = self._rise_fall(samples)
        return Measurements(
            period=period,
            frequency=freq,
            amplitude=maximum - minimum,
            minimum=minimum,
            maximum=maximum,
            vrms=vrms,
            dc=dc,
            sampling_rate=fs,
            rise_time=rise,
            fall_time=fall,
            samples=count,
        )

    @staticmethod
    def _strongest_frequency(values: list[float], dc: float, fs: float) -> float:
        ac = [v - dc for v in values]
        nfft = next_pow2(len(ac) * 5)
        spectrum = fft(ac + [0.0] * (nfft - len(ac)))

        max_index, max_value = 0, 0.0
        for i in range(nfft // 2 + 1):
            magnitude = abs(spectrum[i])
            if magnitude > max_value:
                max_value, max_index = magnitude, i
        freq = max_index * fs / nfft

        # Too few periods for the spectrum to resolve: refine by autocorrelation.
        if freq < fs * (1.0 + math.sqrt(4 * nfft + 1)) / (2 * nfft):
            n = len(ac)
            if freq > 0:
                approx = int(fs / freq)
                lo, hi = approx * 90 // 100, approx * 110 // 100
            else:
                lo, hi = 0, n - 1
            lo, hi = max(lo, 0), min(hi, n - 1)
            best_value, best_lag = -math.inf, 0
            for lag in range(lo, hi + 1):
                value = sum(a * b for a, b in zip(ac[lag:], ac))
                if value > best_value:
                    best_value, best_lag = value, lag
            freq = _div(fs, best_lag)
        return freq

    @staticmethod
    def _rise_fall(samples: list[tuple[float, float]]) -> tuple[float, float]:
        values = [v for _, v in samples]
        maximum, minimum = max(values), min(values)
        top = minimum + 0.9 * (maximum - minimum)
        bottom = minimum + 0.1 * (maximum - minimum)
        rise = fall = math.nan

        # The last edge counts, so both searches run backwards.
        rise_end: int | None = None
        for i in reversed(range(len(samples))):
            if samples[i][1] >= top:
                rise_end = i
            elif rise_end is not None and samples[i][1] <= bottom:
                (k0, v0), (k1, v1) = samples[i], samples[rise_end]
                slope = _div(v1 - v0, k1 - k0)
                rise = _div(maximum - minimum, slope) * 0.8
                break

        fall_end: int | None = None
        for i in reversed(range(len(samples))):
            if samples[i][1] <= bottom:
                fall_end = i
            elif fall_end is not None and samples[i][1] >= top:
                (k0, v0), (k1, v1) = samples[i], samples[fall_end]
                slope = _div(v1 - v0, k1 - k0)
                fall = _div(minimum - maximum, slope) * 0.8
                break

        return rise, fall