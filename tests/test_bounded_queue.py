import pytest

from bounded_queue import AdmissionResult, BoundedQueue
from packet import Packet
from variates import ExponentialVariates


class ScriptedVariates:
    """Hands out fixed samples: arrival gap, then service duration, per admission."""

    def __init__(self, samples):
        self.samples = list(samples)

    def sample(self, rate):
        return self.samples.pop(0)


def offer(queue, number):
    packet = Packet(number)
    return packet, queue.admit(packet)


def test_first_packet_served_on_arrival():
    queue = BoundedQueue("q1", 3, 1.0, 1.0, ScriptedVariates([1.0, 5.0]))
    packet, result = offer(queue, 0)
    assert result is AdmissionResult.ACCEPTED
    assert packet.arrival_time == 1.0
    assert packet.service_start_time == 1.0
    assert packet.departure_time == 6.0
    assert packet.wait_duration == 5.0
    assert packet.queueing_delay == 0.0
    assert (queue.head, queue.tail, queue.length, queue.clock) == (0, 1, 1, 1.0)


def test_fcfs_timeline_fill_drop_and_evict():
    queue = BoundedQueue("q1", 3, 1.0, 1.0, ScriptedVariates(
        [1.0, 5.0, 1.0, 2.0, 1.0, 1.0, 1.0, 1.0, 3.0, 1.0]))
    p0, _ = offer(queue, 0)
    p1, _ = offer(queue, 1)
    p2, _ = offer(queue, 2)

    assert (p1.arrival_time, p1.service_start_time, p1.departure_time) == (2.0, 6.0, 8.0)
    assert (p2.arrival_time, p2.service_start_time, p2.departure_time) == (3.0, 8.0, 9.0)
    assert queue.length == 3 and queue.full
    assert queue.tail == queue.head == 0
    assert queue.total_wait_duration == 5.0 + 6.0 + 6.0
    assert queue.total_length_samples == 0 + 1 + 2

    # nobody has left by t=4, so the fourth packet is dropped but time moves on
    p3, result = offer(queue, 3)
    assert result is AdmissionResult.REJECTED
    assert queue.lost == 1 and queue.length == 3
    assert queue.clock == 4.0
    assert queue.total_wait_duration == 17.0

    # at t=7 p0 has departed and frees its slot
    p4, result = offer(queue, 4)
    assert result is AdmissionResult.ACCEPTED
    assert p4.arrival_time == 7.0
    assert p4.service_start_time == 9.0
    assert p4.departure_time == 10.0
    assert (queue.head, queue.tail, queue.length) == (1, 1, 3)
    assert queue.total_length_samples == 3 + 3
    assert [p.id for p in queue.packets()] == [1, 2, 4]
    assert queue.accepted + queue.lost == queue.arrivals == 5


def test_departure_at_arrival_instant_frees_slot():
    queue = BoundedQueue("q1", 1, 1.0, 1.0, ScriptedVariates([1.0, 2.0, 2.0, 1.0]))
    offer(queue, 0)
    packet, result = offer(queue, 1)
    assert packet.arrival_time == 3.0
    assert result is AdmissionResult.ACCEPTED
    assert packet.service_start_time == 3.0


def test_single_slot_queue_reads_previous_before_overwrite():
    queue = BoundedQueue("q1", 1, 1.0, 1.0, ScriptedVariates([1.0, 2.0, 0.5, 1.0, 2.0, 1.0, 0.1, 4.0]))
    offer(queue, 0)
    _, result = offer(queue, 1)
    assert result is AdmissionResult.REJECTED
    p2, result = offer(queue, 2)
    assert result is AdmissionResult.ACCEPTED
    assert (p2.arrival_time, p2.service_start_time, p2.departure_time) == (3.5, 3.5, 4.5)
    assert queue.head == queue.tail == 0 and queue.length == 1

    # the slot now holds p2; its departure is the reference for the next packet
    p3, result = offer(queue, 3)
    assert result is AdmissionResult.REJECTED
    assert p3.service_start_time == 4.5


def test_invariants_over_long_run():
    capacity = 5
    queue = BoundedQueue("q1", capacity, 1.2, 1.0, ExponentialVariates(seed=11))
    last_arrival = 0.0
    last_lost = 0
    packets = 5000
    for t in range(packets):
        packet, result = offer(queue, t)
        assert 0 <= queue.length <= capacity
        assert queue.lost >= last_lost
        last_lost = queue.lost
        assert 0 <= queue.head < capacity and 0 <= queue.tail < capacity
        if result is AdmissionResult.ACCEPTED:
            assert packet.arrival_time >= last_arrival
            last_arrival = packet.arrival_time
            assert packet.service_start_time >= packet.arrival_time
            assert packet.departure_time >= packet.service_start_time
        live = list(queue.packets())
        assert len(live) == queue.length
        assert all(p.departure_time > queue.clock for p in live)
    assert queue.accepted + queue.lost == packets
    assert queue.lost > 0


@pytest.mark.parametrize("capacity", [0, -3])
def test_capacity_must_be_positive(capacity):
    with pytest.raises(ValueError):
        BoundedQueue("q1", capacity, 1.0, 1.0, ExponentialVariates(seed=1))


def test_rates_must_be_positive():
    with pytest.raises(ValueError):
        BoundedQueue("q1", 4, 0.0, 1.0, ExponentialVariates(seed=1))


def test_record_columns():
    queue = BoundedQueue("q2", 2, 1.0, 1.0, ScriptedVariates([1.0, 1.0]))
    packet, _ = offer(queue, 9)
    record = queue.record(packet)
    assert record["queue"] == "q2"
    assert record["packet"] == 9
    assert record["tail"] == 1 and record["head"] == 0 and record["lost"] == 0
    assert record["departure_time"] == 2.0


def test_shared_arrival_instant():
    queue = BoundedQueue("q1", 2, 1.0, 1.0, ScriptedVariates([4.0, 1.0, 0.5]))
    p0, _ = offer(queue, 0)
    assert p0.departure_time == 5.0

    # a dispatcher brings the queue up to t=6 before offering the next packet
    queue.advance(6.0)
    assert queue.length == 0 and queue.sampled_length == 1 and queue.clock == 6.0
    p1 = Packet(1)
    assert queue.admit(p1, 6.0) is AdmissionResult.ACCEPTED
    assert (p1.arrival_time, p1.service_start_time, p1.departure_time) == (6.0, 6.0, 6.5)
    assert queue.total_length_samples == 0 + 1

    # an instant the queue was not advanced to is handled by admit itself
    p2 = Packet(2)
    queue.variates = ScriptedVariates([2.0])
    assert queue.admit(p2, 6.25) is AdmissionResult.ACCEPTED
    assert queue.clock == 6.25
    assert p2.service_start_time == 6.5 and p2.departure_time == 8.5
    assert queue.total_length_samples == 0 + 1 + 1
