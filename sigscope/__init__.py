"""Signal processing core for a serial data plotter: channels, expressions, averaging, math, XY, FFT, interpolation and simulated input."""

__version__ = "0.1.0"

__all__ = [
    "averager",
    "channels",
    "expressions",
    "interpolator",
    "plotmath",
    "signalprocessing",
    "simulator",
    "xymode",
]