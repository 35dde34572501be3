import math

import pytest

from maggilizer.ring_buffer import RingBuffer
from maggilizer.splice import Splice

RAMP = [0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 1.0]
SQRT_ONE_HALF = 0.70710678118
SQRT_ONE_THIRD = 0.5773502691896258
SQRT_TWO_THIRDS = 0.816496580927726


def _filled_splice(data, reverse, speed, smoothing=0.0, recycle=0.0):
    splice = Splice(len(data))
    splice.update_settings(reverse, speed, len(data), recycle, smoothing)
    splice.mix_in_block(data, [0.0] * len(data))
    return splice


@pytest.mark.parametrize(
    "smoothing, expected",
    [(0.0, 0), (1.0, 6000), (0.5, 3000)],
)
def test_smoothing_frames(smoothing, expected):
    splice = Splice(0)
    splice.update_settings(False, 1.0, 24000, 0.0, smoothing)
    assert splice.smoothing_frames() == expected


def test_mix_in_data_no_recycle():
    splice = Splice(10)
    splice.update_settings(False, 1.0, 10, 0.0, 0.0)
    taken = splice.mix_in_block(RAMP, [0.0] * 10)
    assert taken == 10
    assert splice.data == pytest.approx(RAMP)
    assert splice.is_full()


def test_mix_in_data_with_recycle():
    splice = Splice(10)
    splice.update_settings(False, 1.0, 10, 0.5, 0.0)
    recycle = [1.0, 0.9, 0.8, 0.7, 0.6, 0.5, 0.4, 0.3, 0.2, 0.1]
    splice.mix_in_block(RAMP, recycle)
    expected = [0.6, 0.65, 0.7, 0.75, 0.8, 0.85, 0.9, 0.95, 1.0, 1.05]
    assert splice.data == pytest.approx(expected)


def test_push_to_buffer_forward():
    splice = _filled_splice(RAMP, False, 1.0)
    ring = RingBuffer(20)
    assert splice.push_to_buffer(ring, False) == 10
    assert ring.data[:10] == pytest.approx(RAMP)
    assert ring.write_position == 10


def test_push_to_buffer_reverse():
    splice = _filled_splice(RAMP, True, 1.0)
    ring = RingBuffer(20)
    splice.push_to_buffer(ring, False)
    assert ring.data[:10] == pytest.approx(list(reversed(RAMP)))


def test_push_to_buffer_half_speed():
    splice = _filled_splice(RAMP, False, 0.5)
    ring = RingBuffer(20)
    splice.push_to_buffer(ring, False)
    expected = [0.1, 0.15, 0.2, 0.25, 0.3, 0.35, 0.4, 0.45, 0.5, 0.55] + [0.0] * 10
    assert ring.data == pytest.approx(expected)


def test_push_to_buffer_double_speed():
    splice = _filled_splice(RAMP, False, 2.0)
    ring = RingBuffer(20)
    splice.push_to_buffer(ring, False)
    expected = [0.1, 0.3, 0.5, 0.7, 0.9] + [0.0] * 15
    assert ring.data == pytest.approx(expected)


def test_push_to_buffer_half_speed_reverse():
    splice = _filled_splice(RAMP, True, 0.5)
    ring = RingBuffer(20)
    splice.push_to_buffer(ring, False)
    expected = [1.0, 0.95, 0.9, 0.85, 0.8, 0.75, 0.7, 0.65, 0.6, 0.55] + [0.0] * 10
    assert ring.data == pytest.approx(expected)


def test_push_to_buffer_double_speed_reverse():
    splice = _filled_splice(RAMP, True, 2.0)
    ring = RingBuffer(20)
    splice.push_to_buffer(ring, False)
    expected = [1.0, 0.8, 0.6, 0.4, 0.2] + [0.0] * 15
    assert ring.data == pytest.approx(expected)


def test_push_to_buffer_smoothing():
    splice = _filled_splice([1.0] * 12, False, 1.0, smoothing=1.0)
    assert splice.smoothing_frames() == 3
    ring = RingBuffer(24)
    splice.push_to_buffer(ring, True)
    expected = [
        0.0, SQRT_ONE_THIRD, SQRT_TWO_THIRDS, 1, 1, 1,
        1, 1, 1, SQRT_TWO_THIRDS, SQRT_ONE_THIRD, 0.0,
    ]
    assert ring.data[:12] == pytest.approx(expected)


def test_push_to_buffer_three_quarter_smoothing_double_speed():
    splice = _filled_splice([1.0] * 24, False, 2.0, smoothing=0.75)
    assert splice.smoothing_frames() == 2
    ring = RingBuffer(48)
    splice.push_to_buffer(ring, True)
    expected = [0.0, SQRT_ONE_HALF] + [1.0] * 8 + [SQRT_ONE_HALF, 0.0] + [0.0] * 12
    assert ring.data[:24] == pytest.approx(expected)


def test_push_to_buffer_full_smoothing_double_speed():
    splice = _filled_splice([1.0] * 24, False, 2.0, smoothing=1.0)
    assert splice.smoothing_frames() == 3
    ring = RingBuffer(48)
    splice.push_to_buffer(ring, True)
    expected = (
        [0.0, SQRT_ONE_THIRD, SQRT_TWO_THIRDS]
        + [1.0] * 6
        + [SQRT_TWO_THIRDS, SQRT_ONE_THIRD, 0.0]
        + [0.0] * 12
    )
    assert ring.data[:24] == pytest.approx(expected)
    assert not any(math.isnan(sample) for sample in ring.data)


def test_smoothing_crossfades_with_existing_playback():
    splice = _filled_splice([0.0] * 12, False, 1.0, smoothing=1.0)
    ring = RingBuffer(24)
    ring.write_block([2.0] * 12)
    ring.backtrack_write_head(12)
    splice.push_to_buffer(ring, True)
    assert ring.data[0] == pytest.approx(2.0)
    assert ring.data[1] == pytest.approx(2.0 * SQRT_TWO_THIRDS)
    assert ring.data[3:9] == pytest.approx([0.0] * 6)
    assert ring.data[11] == pytest.approx(2.0)


def test_large_buffers_reverse():
    size = 48000
    splice = Splice(size)
    splice.update_settings(True, 0.667419910, size, 0.5, 0.0)
    splice.mix_in_block([0.0] * size, [0.0] * size)
    assert splice.is_full()
    ring = RingBuffer(size * 2)
    assert splice.push_to_buffer(ring, False) == size
    assert ring.write_position == size
    assert not any(ring.data)


@pytest.mark.parametrize(
    "speed, splice_size, recycle",
    [(1.33483982, 13920, 0.800000012), (1.18920708, 33792, 0.300000012)],
)
def test_bad_buffers(speed, splice_size, recycle):
    size = 48000
    splice = Splice(size)
    splice.update_settings(False, speed, splice_size, recycle, 0.0)
    taken = splice.mix_in_block([0.0] * size, [0.0] * size)
    assert taken == splice_size
    assert splice.is_full()
    ring = RingBuffer(size * 2)
    assert splice.push_to_buffer(ring, False) == splice_size
    assert ring.write_position == splice_size
    assert not any(ring.data)


def test_push_wraps_ring_write_head():
    splice = _filled_splice(RAMP, False, 1.0)
    ring = RingBuffer(12)
    ring.advance_write_head(6)
    splice.push_to_buffer(ring, False)
    assert ring.write_position == 4
    assert ring.data[6:] == pytest.approx(RAMP[:6])
    assert ring.data[:4] == pytest.approx(RAMP[6:])


def test_mix_in_block_stops_when_full():
    splice = Splice(10)
    splice.update_settings(False, 1.0, 4, 0.0, 0.0)
    assert splice.is_empty()
    assert splice.mix_in_block(RAMP, [0.0] * 10) == 4
    assert splice.free_space() == 0
    assert splice.data[:4] == pytest.approx(RAMP[:4])
    assert splice.data[4:] == [0.0] * 6


def test_partial_fill_and_reset():
    splice = Splice(10)
    splice.update_settings(False, 1.0, 10, 0.0, 0.0)
    splice.mix_in_block(RAMP[:3], [0.0] * 3)
    assert not splice.is_empty()
    assert not splice.is_full()
    assert splice.free_space() == 7
    splice.reset()
    assert splice.is_empty()
    assert splice.free_space() == 10


def test_nonzero_data_and_zeroing():
    splice = Splice(10)
    assert splice.has_nonzero_data() is False
    splice.update_settings(False, 1.0, 10, 0.0, 0.0)
    splice.mix_in_block(RAMP, [0.0] * 10)
    assert splice.has_nonzero_data() is True
    splice.zero_data()
    assert splice.has_nonzero_data() is False
    assert splice.data == [0.0] * 10


def test_update_settings_rejects_empty_splice():
    with pytest.raises(ValueError):
        Splice(10).update_settings(False, 1.0, 0, 0.0, 0.0)


def test_update_settings_rejects_non_positive_speed():
    with pytest.raises(ValueError):
        Splice(10).update_settings(False, 0.0, 10, 0.0, 0.0)


def test_splice_larger_than_storage_is_rejected():
    splice = Splice(4)
    splice.update_settings(False, 1.0, 8, 0.0, 0.0)
    with pytest.raises(ValueError):
        splice.mix_in_block([1.0] * 8, [0.0] * 8)
    with pytest.raises(ValueError):
        splice.push_to_buffer(RingBuffer(16), False)


def test_short_recycle_buffer_is_rejected():
    splice = Splice(10)
    splice.update_settings(False, 1.0, 10, 0.5, 0.0)
    with pytest.raises(ValueError):
        splice.mix_in_block(RAMP, [0.0] * 5)


def test_negative_storage_size_is_rejected():
    with pytest.raises(ValueError):
        Splice(-1)