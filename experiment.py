import analytic
from bounded_queue import AdmissionResult, BoundedQueue
from dispatch import POLICIES, SHORTEST, make_dispatcher
from packet import Packet
from variates import ExponentialVariates

# ========== defaults ==========
LAMBDA = 1.0          # base arrival rate (packets per unit time)
MU = 1.1              # base service rate (packets per unit time)
MAX_QLEN = 10         # capacity K of each queue, packet in service included
MAX_SERV = 2          # number of queues the dispatcher routes over
MAX_TIME = 10000      # packets per replication
MAX_ITER = 20         # replications per sweep value
QUE_PMAX = 3.0        # upper end of the sweep
QUE_INCR = 0.1        # sweep step

PARAMETERS = ("lambda", "mu", "load")


class ConfigurationError(ValueError):
    pass


class SweepConfig:
    def __init__(self, parameter="mu", v_min=None, v_max=QUE_PMAX, step=QUE_INCR,
                 replications=MAX_ITER, packets=MAX_TIME, capacity=MAX_QLEN,
                 servers=MAX_SERV, policy=SHORTEST, arrival_rate=LAMBDA,
                 service_rate=MU, seed=None, record_packets=False, verbose=False):
        if parameter not in PARAMETERS:
            raise ConfigurationError(f"unknown sweep parameter {parameter!r}, expected one of {PARAMETERS}")
        if policy not in POLICIES:
            raise ConfigurationError(f"unknown dispatch policy {policy!r}, expected one of {POLICIES}")
        if not (arrival_rate > 0 and service_rate > 0):
            raise ConfigurationError(f"rates must be positive, got λ={arrival_rate} μ={service_rate}")

        self.parameter = parameter
        self.policy = policy
        self.arrival_rate = arrival_rate
        self.service_rate = service_rate
        self.v_min = self.base_value() if v_min is None else v_min
        self.v_max = v_max
        self.step = step
        self.replications = replications
        self.packets = packets
        self.capacity = capacity
        self.servers = servers
        self.seed = seed
        self.record_packets = record_packets
        self.verbose = verbose

        if capacity < 1:
            raise ConfigurationError(f"capacity must be at least 1, got {capacity}")
        if servers < 1:
            raise ConfigurationError(f"server count must be at least 1, got {servers}")
        if replications < 1:
            raise ConfigurationError(f"replications must be at least 1, got {replications}")
        if packets < 1:
            raise ConfigurationError(f"packets per replication must be at least 1, got {packets}")
        if not step > 0:
            raise ConfigurationError(f"sweep step must be positive, got {step}")
        if not self.v_min > 0:
            raise ConfigurationError(f"swept {parameter} must stay positive, got v_min={self.v_min}")
        if self.v_max < self.v_min:
            raise ConfigurationError(f"empty sweep: v_max={self.v_max} < v_min={self.v_min}")

    @property
    def parameter_index(self):
        return PARAMETERS.index(self.parameter)

    def base_value(self):
        if self.parameter == "lambda":
            return self.arrival_rate
        if self.parameter == "mu":
            return self.service_rate
        return self.arrival_rate / self.service_rate

    def rates_for(self, value):
        """(λ, μ, ρ) for one sweep value."""
        if self.parameter == "lambda":
            return value, self.service_rate, value / self.service_rate
        if self.parameter == "mu":
            return self.arrival_rate, value, self.arrival_rate / value
        return value * self.service_rate, self.service_rate, value

    def sweep_values(self):
        # repeated addition; float drift decides whether v_max itself is reached
        value = self.v_min
        while value <= self.v_max:
            yield value
            value += self.step


def analytic_columns(queue):
    return {
        "analytic_bp": analytic.blocking_probability(queue.arrival_rate, queue.service_rate, queue.capacity),
        "analytic_len": analytic.mean_number_in_system(queue.arrival_rate, queue.service_rate, queue.capacity),
        "analytic_wait": analytic.mean_wait(queue.arrival_rate, queue.service_rate, queue.capacity),
    }


class ExperimentDriver:
    """Sweeps one parameter and runs independent replications at each value."""

    def __init__(self, config, variates=None):
        self.config = config
        self.variates = variates if variates is not None else ExponentialVariates(config.seed)
        self.dispatcher = make_dispatcher(config.policy, self.variates)
        self.packet_records = []
        self.replication_records = []

    def make_queues(self, value):
        arrival_rate, service_rate, rho = self.config.rates_for(value)
        return [BoundedQueue(f"q{i + 1}", self.config.capacity, arrival_rate, service_rate,
                             self.variates, load=rho)
                for i in range(self.config.servers)]

    def trace(self, queue, packet, result):
        suffix = "" if result is AdmissionResult.ACCEPTED else " -> dropped"
        print(f"[{packet.arrival_time:.2f}]: pkt {packet.id} arrives at {queue.name} "
              f"and finds {queue.sampled_length} packets in the queue{suffix}")

    def simulate(self, queues):
        # one Poisson stream for the whole system, λ per queue; every queue is
        # brought up to the arrival instant before the dispatcher compares lengths
        stream_rate = sum(q.arrival_rate for q in queues)
        now = 0.0
        for t in range(self.config.packets):
            now += self.variates.sample(stream_rate)
            for queue in queues:
                queue.advance(now)
            packet = Packet(t)
            queue = self.dispatcher.select(queues)
            result = queue.admit(packet, now)
            if self.config.record_packets:
                self.packet_records.append(queue.record(packet))
            if self.config.verbose:
                self.trace(queue, packet, result)
        return queues

    def estimates(self, queues):
        packets = self.config.packets
        lost = sum(q.lost for q in queues)
        length_samples = sum(q.total_length_samples for q in queues)
        # time-normalised wait per queue, every clock ends at the last arrival
        waits = [q.total_wait_duration / q.clock for q in queues if q.clock > 0]
        return {
            "empirical_bp": lost / packets,
            "empirical_len": length_samples / packets,
            "empirical_wait": sum(waits) / len(waits) if waits else 0.0,
        }

    def replicate(self, value, index):
        queues = self.simulate(self.make_queues(value))
        first = queues[0]
        record = {
            "replication": index,
            "lambda": first.arrival_rate,
            "mu": first.service_rate,
            "load": first.load,
        }
        record.update(analytic_columns(first))
        record.update(self.estimates(queues))
        self.replication_records.append(record)
        return queues, record

    def sweep(self):
        replications = self.config.replications
        for value in self.config.sweep_values():
            totals = {"empirical_bp": 0.0, "empirical_len": 0.0, "empirical_wait": 0.0}
            queues = None
            for j in range(replications):
                queues, record = self.replicate(value, j)
                for key in totals:
                    totals[key] += record[key]

            # analytic columns come from the last replication's first queue
            first = queues[0]
            result = {
                "replications": replications,
                "value": value,
                "lambda": first.arrival_rate,
                "mu": first.service_rate,
                "load": first.load,
            }
            result.update(analytic_columns(first))
            for key, total in totals.items():
                result[key] = total / replications
            yield result

    def run(self):
        return list(self.sweep())
