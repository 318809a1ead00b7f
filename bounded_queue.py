from enum import Enum

# ========== finite FCFS queue on a circular array ==========
#
#   departure <- [head][*][*][*][tail] <- arrival
#
# head is the oldest packet still in the system, tail the slot the next
# admitted packet is written to. Occupancy is always read from `length`:
# head == tail means either empty or full and the cursors alone cannot
# tell which.


class AdmissionResult(Enum):
    ACCEPTED = 1
    REJECTED = 2


class BoundedQueue:
    def __init__(self, name, capacity, arrival_rate, service_rate, variates, load=None):
        if capacity < 1:
            raise ValueError(f"queue capacity must be at least 1, got {capacity}")
        if not (arrival_rate > 0 and service_rate > 0):
            raise ValueError(f"rates must be positive, got λ={arrival_rate} μ={service_rate}")
        self.name = name
        self.capacity = capacity
        self.arrival_rate = arrival_rate  # λ
        self.service_rate = service_rate  # μ
        self.load = load if load is not None else arrival_rate / service_rate  # ρ
        self.variates = variates

        self.slots = [None] * capacity
        self.head = 0
        self.tail = 0
        self.length = 0
        self.clock = 0.0  # latest arrival instant this queue has been advanced to
        self.sampled_length = 0  # length just before the last eviction pass

        self.accepted = 0
        self.lost = 0
        self.total_wait_duration = 0.0
        self.total_length_samples = 0.0

    @property
    def full(self):
        return self.length == self.capacity

    @property
    def arrivals(self):
        return self.accepted + self.lost

    def packets(self):
        """Packets currently in the system, oldest first."""
        for i in range(self.length):
            yield self.slots[(self.head + i) % self.capacity]

    def previous_departure(self):
        # the packet most recently written sits just behind tail; its slot may be
        # overwritten by this very admission when capacity is 1, so copy the time out
        if self.accepted == 0:
            return 0.0
        return self.slots[(self.tail - 1) % self.capacity].departure_time

    def evict(self, now):
        """Drop every packet that has departed by `now`, starting from head."""
        evicted = 0
        while self.length > 0:
            packet = self.slots[self.head]
            if packet.departure_time > now:
                break
            self.head = (self.head + 1) % self.capacity
            self.length -= 1
            evicted += 1
        return evicted

    def advance(self, now):
        """Move the clock to the arrival instant `now` and evict what has left by then."""
        self.sampled_length = self.length
        self.evict(now)
        self.clock = now

    def admit(self, packet, arrival_time=None):
        """Offer `packet` to the queue.

        With no `arrival_time` the queue draws its own gap from λ, starting at
        its clock, so a run of dropped packets still moves time forward. A
        dispatcher feeding several queues from one stream passes the shared
        arrival instant instead, after advancing every queue to it.
        """
        previous_departure = self.previous_departure()

        if arrival_time is None:
            arrival_time = self.clock + self.variates.sample(self.arrival_rate)
            self.advance(arrival_time)
        elif arrival_time != self.clock:
            self.advance(arrival_time)
        service_duration = self.variates.sample(self.service_rate)
        packet.schedule(arrival_time, service_duration, previous_departure)

        if self.full:
            self.lost += 1
            return AdmissionResult.REJECTED

        self.slots[self.tail] = packet
        self.tail = (self.tail + 1) % self.capacity
        self.length += 1
        self.accepted += 1
        self.total_wait_duration += packet.wait_duration
        self.total_length_samples += self.sampled_length
        return AdmissionResult.ACCEPTED

    def record(self, packet):
        return {
            "queue": self.name,
            "packet": packet.id,
            "arrival_time": packet.arrival_time,
            "service_start_time": packet.service_start_time,
            "service_duration": packet.service_duration,
            "departure_time": packet.departure_time,
            "wait_duration": packet.wait_duration,
            "head": self.head,
            "tail": self.tail,
            "lost": self.lost,
        }

    def __repr__(self):
        return (f"BoundedQueue({self.name!r}, K={self.capacity}, λ={self.arrival_rate}, "
                f"μ={self.service_rate}, len={self.length}, lost={self.lost})")
