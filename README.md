# maggilizer

An audio effect that records incoming audio into fixed-length splices and
plays each finished splice back through a delay line. Playback can be
reversed and pitch shifted, the ends of each splice can be crossfaded, and
the delayed output is fed back ("recycled") into the next splice. The
package uses only the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Parameters

Parameters are held by `maggilizer.params.FXParams`. The current values are
in its `rtpcs` attribute, an `RtpcParams` dataclass. Set one value with
`set_param(param_id, value)`, where `param_id` is a `ParamId` or its integer
value:

| Parameter   | Given as      | Meaning                                           |
|-------------|---------------|---------------------------------------------------|
| `REVERSE`   | 0 / non-zero  | Play each splice backwards                        |
| `PITCH`     | cents         | Playback speed is `2 ** (pitch / 1200)`           |
| `SPLICE`    | milliseconds  | Length of each recorded splice                    |
| `DELAY`     | milliseconds  | Silence written before each splice is played back |
| `RECYCLE`   | percent       | Feedback of playback into the next splice         |
| `MIX`       | percent       | Wet/dry balance                                   |
| `SMOOTHING` | percent       | Length of the crossfade at the splice edges       |

`RECYCLE`, `MIX` and `SMOOTHING` are divided by 100 when stored. An unknown
id raises `ValueError`. Every value defaults to zero or `False`.

`FXParams` also tracks changes. `take_changes()` returns the set of
`ParamId`s changed since the last call and then clears that set.
`clone()` returns a copy with every parameter marked as changed.

### Parameter blocks

`FXParams.set_params_block(block)` and `FXParams.from_block(block)` load all
seven values, in `ParamId` order, from a block of seven little-endian 32-bit
floats (28 bytes). Any other size raises `ParamBlockError`, a subclass of
`ValueError`. The one exception is `from_block(b"")`, which gives the
defaults.

`encode_bank_parameters(properties)` packs a mapping of the properties
`reverse`, `pitch`, `splice`, `delay`, `recycle` and `mix` into little-endian
32-bit floats. It does not write smoothing, so its 24-byte output is one
float short of a full parameter block. A missing property raises `KeyError`.

## Processing audio

```python
from maggilizer.params import FXParams, ParamId
from maggilizer.effect import MaggilizerFX, AudioBlock

params = FXParams()
params.set_param(ParamId.PITCH, 1200.0)   # one octave up
params.set_param(ParamId.SPLICE, 100.0)   # 100 ms splices
params.set_param(ParamId.RECYCLE, 50.0)
params.set_param(ParamId.MIX, 50.0)

fx = MaggilizerFX(params, sample_rate=48000, channel_count=1, samples_per_frame=512)

block = AudioBlock(channels=[[0.0] * 512])
fx.execute(block)        # processes the block in place
```

An `AudioBlock` holds one list of floats per channel. All channels have the
same length, and only the first `valid_frames` samples are processed. That
count defaults to the full length. `execute` raises `ValueError` if the block
has more channels than the effect or more frames than `samples_per_frame`.

Splice and delay lengths are rounded up to whole multiples of
`samples_per_frame`. Splices can be at most one second long. `SPLICE` must be
set to a positive length before the first block: a zero-length splice raises
`ValueError`.

When the input ends, set the block's `state` to `BufferState.NO_MORE_DATA`.
The effect's `TailHandler` then pads each block with silence and reports it
as `BufferState.DATA_READY`. It does this for up to
`sample_rate * (1 + 4 * recycle)` frames while the output fades out linearly.

Other members:

- `fx.reset()` silences every buffer and resets all positions.
- `fx.plugin_info()` returns a `PluginInfo` describing an in-place effect.
- `fx.time_skip(frames)` returns `BufferState.DATA_READY`.

## Building blocks

- `maggilizer.ring_buffer.RingBuffer(size)` is a circular float buffer with
  separate read and write heads. It provides `write_block`,
  `write_silent_block`, `advance_write_head`, `backtrack_write_head`,
  `read_block`, `peek_read_block` and `peek_block`. A write that does not
  fit raises `ValueError`. Reads return at most the readable samples.
- `maggilizer.splice.Splice(size)` collects input with `mix_in_block`. It
  then renders the splice into a ring buffer with `push_to_buffer`, using
  linear interpolation for the pitch change, optional reversal and an
  optional equal-power crossfade with what the ring buffer already holds.
- `maggilizer.utilities` has `ms_to_samples`, `align_up`, `wet_dry_mix`,
  `equal_power_xfade`, `equal_power_fade_in`, `equal_power_fade_out`,
  `mix_buffer_into` and `calculate_speed`.

## What it does not do

The package processes audio held in Python lists of floats and nothing more.
It does not read or write audio files, play or record through an audio
device, or run as a command-line program. Connecting it to a source and a
sink of audio is up to the caller.