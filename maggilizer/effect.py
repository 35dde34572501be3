"""The splice/reverse/pitch delay effect that processes blocks of audio."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from maggilizer.params import COMPANY_ID, PLUGIN_ID, FXParams
from maggilizer.ring_buffer import RingBuffer
from maggilizer.splice import Splice
from maggilizer.utilities import (
    align_up,
    calculate_speed,
    ms_to_samples,
    wet_dry_mix,
)

PLAYBACK_BUFFER_SECONDS = 5.0
MAX_SPLICE_BUFFER_SECONDS = 1.0
CROSSFADE_FRAMES = 256
MAX_SUPPORTED_CHANNELS = 1


class BufferState(Enum):
    """Whether a block carries live input or marks the end of the input."""

    DATA_READY = "data_ready"
    NO_MORE_DATA = "no_more_data"


@dataclass
class AudioBlock:
    """One block of audio: one list of samples per channel.

    Every channel holds ``max_frames`` samples, of which the first
    ``valid_frames`` are meaningful.
    """

    channels: list[list[float]]
    valid_frames: int | None = None
    state: BufferState = BufferState.DATA_READY

    def __post_init__(self) -> None:
        lengths = {len(channel) for channel in self.channels}
        if len(lengths) > 1:
            raise ValueError("all channels of a block must have the same length")
        if self.valid_frames is None:
            self.valid_frames = self.max_frames
        if not 0 <= self.valid_frames <= self.max_frames:
            raise ValueError(
                f"valid frames {self.valid_frames} outside 0..{self.max_frames}"
            )

    @property
    def max_frames(self) -> int:
        """Capacity of each channel in frames."""
        return len(self.channels[0]) if self.channels else 0

    @property
    def num_channels(self) -> int:
        """Number of channels in the block."""
        return len(self.channels)

    def zero_pad(self) -> None:
        """Silence every frame past the valid ones."""
        for channel in self.channels:
            channel[self.valid_frames:] = [0.0] * (self.max_frames - self.valid_frames)


@dataclass(frozen=True)
class PluginInfo:
    """Static description of the effect for the host."""

    plugin_type: str = "effect"
    is_in_place: bool = True
    can_process_objects: bool = False
    company_id: int = COMPANY_ID
    plugin_id: int = PLUGIN_ID


@dataclass
class TailHandler:
    """Keeps an effect producing frames for a while after its input ends.

    Once a block arrives marked :attr:`BufferState.NO_MORE_DATA`, the block
    is padded with silence to its full size and reported as ready until the
    requested number of tail frames has been produced.
    """

    in_tail: bool = False
    frames_remaining: int = 0

    def handle_tail(self, block: AudioBlock, max_tail_samples: int) -> None:
        """Pad ``block`` during the tail and adjust its state and valid frames."""
        if block.state is not BufferState.NO_MORE_DATA:
            self.reset()
            return

        if not self.in_tail:
            self.in_tail = True
            self.frames_remaining = max_tail_samples

        if self.frames_remaining <= 0:
            return

        tail_frames = block.max_frames - block.valid_frames
        block.zero_pad()
        self.frames_remaining -= min(tail_frames, self.frames_remaining)
        block.valid_frames = block.max_frames
        if self.frames_remaining > 0:
            block.state = BufferState.DATA_READY

    def reset(self) -> None:
        """Leave tail mode."""
        self.in_tail = False
        self.frames_remaining = 0


@dataclass
class _Channel:
    splice: Splice
    playback: RingBuffer


@dataclass
class _Settings:
    reverse: bool
    speed: float
    splice_size: int
    delay_size: int
    recycle: float
    smoothing: float
    mix: float
    tail_mix: float = 1.0


class MaggilizerFX:
    """In-place effect that records splices and plays them back altered.

    Each channel records incoming audio into a splice; a full splice is
    rendered (reversed and/or pitched) into a playback buffer after an
    optional delay, and the playback is mixed with the dry input and fed
    back into the next splice.
    """

    def __init__(
        self,
        params: FXParams,
        sample_rate: int,
        channel_count: int,
        samples_per_frame: int,
    ) -> None:
        if sample_rate <= 0:
            raise ValueError(f"sample rate must be positive, got {sample_rate}")
        if channel_count <= 0:
            raise ValueError(f"channel count must be positive, got {channel_count}")
        if samples_per_frame <= 0:
            raise ValueError(
                f"samples per frame must be positive, got {samples_per_frame}"
            )
        self.params = params
        self.sample_rate = sample_rate
        self.channel_count = channel_count
        self.samples_per_frame = samples_per_frame

        splice_samples = int(MAX_SPLICE_BUFFER_SECONDS * sample_rate)
        playback_samples = int(PLAYBACK_BUFFER_SECONDS * sample_rate)
        # Splice lengths are rounded up to whole frames, so leave room for that.
        splice_storage = align_up(splice_samples, samples_per_frame)
        self._channels = [
            _Channel(Splice(splice_storage), RingBuffer(playback_samples))
            for _ in range(channel_count)
        ]
        self._scratch = [0.0] * samples_per_frame
        self.tail_handler = TailHandler()
        self.tail_position = 0

    def reset(self) -> None:
        """Return every buffer and position to its initial, silent state."""
        self.tail_position = 0
        for channel in self._channels:
            channel.splice.zero_data()
            channel.splice.reset()
            channel.playback.data = [0.0] * channel.playback.size
            channel.playback.reset()

    def plugin_info(self) -> PluginInfo:
        """Describe the effect to the host."""
        return PluginInfo()

    def execute(self, block: AudioBlock) -> None:
        """Process ``block`` in place."""
        if block.num_channels > self.channel_count:
            raise ValueError(
                f"block has {block.num_channels} channels, effect has {self.channel_count}"
            )
        if block.max_frames > self.samples_per_frame:
            raise ValueError(
                f"block of {block.max_frames} frames exceeds {self.samples_per_frame}"
            )

        # Read the state first: the tail handler turns ended input back into data.
        no_more_data = block.state is BufferState.NO_MORE_DATA
        rtpcs = self.params.rtpcs

        settings = _Settings(
            reverse=rtpcs.reverse,
            speed=calculate_speed(rtpcs.pitch),
            splice_size=align_up(
                ms_to_samples(self.sample_rate, rtpcs.splice), self.samples_per_frame
            ),
            delay_size=align_up(
                ms_to_samples(self.sample_rate, rtpcs.delay), self.samples_per_frame
            ),
            recycle=rtpcs.recycle,
            smoothing=rtpcs.smoothing,
            mix=rtpcs.mix,
        )

        max_tail_samples = int(
            self.sample_rate * MAX_SPLICE_BUFFER_SECONDS * (1 + 4 * rtpcs.recycle)
        )
        self.tail_handler.handle_tail(block, max_tail_samples)

        frames = block.valid_frames
        if no_more_data:
            settings.tail_mix = wet_dry_mix(
                1.0, 0.0, self.tail_position / max_tail_samples
            )
            self.tail_position += frames

        self._scratch = [0.0] * self.samples_per_frame
        for samples, channel in zip(block.channels, self._channels):
            self._process_channel(samples, frames, channel, settings)

    def _apply_settings(self, splice: Splice, settings: _Settings) -> None:
        splice.update_settings(
            settings.reverse,
            settings.speed,
            settings.splice_size,
            settings.recycle,
            settings.smoothing,
        )

    def _process_channel(
        self,
        samples: list[float],
        frames: int,
        channel: _Channel,
        settings: _Settings,
    ) -> None:
        splice, playback = channel.splice, channel.playback

        if splice.is_empty():
            self._apply_settings(splice, settings)

        if playback.has_data() and frames > 0:
            played = playback.read_block(frames)
            self._scratch[: len(played)] = played

        if splice.is_full():
            if settings.delay_size > 0:
                playback.write_silent_block(settings.delay_size)
            splice.push_to_buffer(playback, playback.has_data())
            splice.reset()
            self._apply_settings(splice, settings)

        splice.mix_in_block(samples[:frames], self._scratch[:frames])

        for index, (dry, wet) in enumerate(zip(samples[:frames], self._scratch)):
            samples[index] = wet_dry_mix(dry, wet, settings.mix) * settings.tail_mix

    def time_skip(self, frames: int) -> BufferState:
        """Skip ``frames`` frames of processing; the effect keeps producing output."""
        return BufferState.DATA_READY