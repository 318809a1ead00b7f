class Packet:
    """One arrival's timeline. The owning queue fills in the times on admission."""

    def __init__(self, number):
        self.id = number
        self.arrival_time = 0.0
        self.service_start_time = 0.0
        self.service_duration = 0.0
        self.departure_time = 0.0
        self.wait_duration = 0.0

    def schedule(self, arrival_time, service_duration, previous_departure):
        # FCFS single server: service starts when the packet arrives, or when
        # the packet ahead of it leaves, whichever is later
        self.arrival_time = arrival_time
        self.service_duration = service_duration
        self.service_start_time = max(arrival_time, previous_departure)
        self.departure_time = self.service_start_time + service_duration
        self.wait_duration = self.departure_time - arrival_time

    @property
    def queueing_delay(self):
        return self.service_start_time - self.arrival_time

    def __repr__(self):
        return (f"Packet({self.id}, arrival={self.arrival_time:.4f}, "
                f"start={self.service_start_time:.4f}, departure={self.departure_time:.4f})")
