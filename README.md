# sigscope

The computational core of a serial-data plotter and software oscilloscope.
It is written in plain Python and has no third-party dependencies.

## What is in it

- **Channel layout** (`sigscope.channels`): 16 analog channels, 3 math
  channels and 3 groups of 32 logic bits. Helpers such as `fft_index`,
  `is_fft_index`, `is_logic_ch`, `chid_to_logic_group` and
  `chid_to_logic_group_bit` map between channel ids, selection-list indexes,
  logic groups and bits, and the two FFT entries.
- **Expressions** (`sigscope.expressions`):
  - `SimpleExpressionParser` evaluates constant input such as `10m` or `1,5k`.
    A comma counts as a decimal point, and SI prefixes become factors.
  - `ExpressionEngine` evaluates arithmetic over named variables, with the
    `Math` functions.
  - `VariableExpressionParser` stores one checked expression and evaluates it
    again and again.
  - `replace_unit_prefixes` expands number prefixes on its own.
  - A bad expression raises `ExpressionError`.
- **Averaging** (`sigscope.averager.Averager`): a running mean over the last
  *N* waveforms or points on each analog channel. *N* is 8 unless you change
  it with `set_count`.
- **XY mode** (`sigscope.xymode.calculate_xy`): pairs two channels into
  `(time, x, y)` triples. Channels of different length are cut to their common
  time range, and the DC can be removed.
- **Channel math** (`sigscope.plotmath.PlotMath`): adds, subtracts, multiplies
  or divides two scaled operands, each a channel or a constant
  (`MathOperation`). Channel operands of different length raise `MathError`.
- **Spectrum and measurements** (`sigscope.signalprocessing`):
  - `fft` is a radix-2 transform and `next_pow2` rounds a length up to a power
    of two.
  - `SignalProcessing.get_fft_plot` gives an amplitude spectrum, or a
    periodogram or Welch estimate in dB (`FFTType`). It can apply a Hamming,
    Hann or Blackman window (`FFTWindow`).
  - `SignalProcessing.process` returns `Measurements`: period, frequency,
    amplitude, minimum, maximum, RMS, DC, sampling rate, rise and fall time,
    and the sample count.
- **Interpolation** (`sigscope.interpolator`): `Interpolator` upsamples the
  visible part of a trace through a FIR low-pass filter. Load the filter with
  `load_filter` or `load_filter_file`. `fir_filter` is the convolution it uses.
- **Simulated input** (`sigscope.simulator`):
  - `RollingGenerator` builds point frames (`$$P...`) from formulas in `t`.
  - `OscGenerator` builds float32 waveform frames (`$$C...`) from formulas in
    `t` and `time`.
  - `logic_test_frame` and `clear_all_frame` return fixed test frames.

## What it does not do

The package has no window, plot or command-line program. It does not open
serial ports and does not check for newer releases. Callers supply the samples
and pass the results on for display.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Examples

```python
from sigscope.channels import fft_index, is_fft_index, is_logic_ch

fft_index(0)        # 22
is_fft_index(23)    # True
is_logic_ch(19)     # True
```

```python
from sigscope.expressions import SimpleExpressionParser

parser = SimpleExpressionParser()
parser.validate("2k+500")    # True
parser.evaluate("2k+500")    # 2500.0
```

```python
from sigscope.averager import Averager

averager = Averager()
averager.new_data_point(0, 0.0, 1.0, False)   # (0.0, 1.0)
averager.new_data_point(0, 1.0, 3.0, True)    # (0.5, 2.0)
```

```python
from sigscope.plotmath import MathOperation, PlotMath

result = PlotMath().reset_math(
    1, MathOperation.ADD, [(0, 1), (1, 2)], [(0, 10), (1, 20)], False, False, 1.0, 1.0
)
result.channel   # 16
result.data      # [(0.0, 11.0), (1.0, 22.0)]
```

```python
from sigscope.signalprocessing import fft, next_pow2

next_pow2(5)            # 8
fft([1, 0, 0, 0])       # [(1+0j), (1+0j), (1+0j), (1+0j)]
```