import sys

import report
from dispatch import POLICIES
from experiment import (LAMBDA, MU, MAX_ITER, PARAMETERS, QUE_PMAX, ConfigurationError,
                        ExperimentDriver, SweepConfig)

USAGE = """USAGE: queue-dse <λ> <μ> <strategy> <parameter> <range max> <iterations>
λ: intensity or arrival rate (i.e. 1.0)
μ: service rate (i.e. 1.1)
assignment strategy: (0=random,1=min)
variable parameter: (0=lambda,1=mu,2=load)
range max: (i.e. 3.0)
iterations: number of times to run each simulation
"""


def parse_args(args):
    if not args:
        print(USAGE)
        print("WARNING: Using default values")
        return SweepConfig(arrival_rate=LAMBDA, service_rate=MU, v_max=QUE_PMAX, replications=MAX_ITER)

    lambd = float(args[0])
    mu = float(args[1])
    strategy = int(args[2])
    parameter = int(args[3])
    if strategy not in (0, 1):
        raise ConfigurationError(f"assignment strategy must be 0 or 1, got {strategy}")
    if parameter not in (0, 1, 2):
        raise ConfigurationError(f"variable parameter must be 0, 1 or 2, got {parameter}")
    return SweepConfig(parameter=PARAMETERS[parameter], v_max=float(args[4]),
                       replications=int(args[5]), policy=POLICIES[strategy],
                       arrival_rate=lambd, service_rate=mu)


def print_settings(config):
    print(f"λ={config.arrival_rate:2.4f}")
    print(f"μ={config.service_rate:2.4f}")
    print(f"assignment strategy={config.policy}")
    print(f"variable parameter={config.parameter}")
    print(f"range={config.v_min:2.4f}..{config.v_max:2.4f}")
    print("\n--------- BEGIN SIMULATION ---------\n")


def print_result(result):
    print(f"{result['replications']},{result['lambda']:2.2f},{result['mu']:2.2f},{result['load']:3.6f},"
          f"{result['analytic_bp']:3.6f},{result['empirical_bp']:3.6f},"
          f"{result['analytic_len']:3.5f},{result['empirical_len']:3.5f},"
          f"{result['analytic_wait']:3.6f},{result['empirical_wait']:3.6f}")


def main(argv=None):
    args = sys.argv[1:] if argv is None else argv
    if args and len(args) != 6:
        print(USAGE)
        return 1

    try:
        config = parse_args(args)
    except ValueError as e:
        print(f"error: {e}")
        return 1

    print_settings(config)
    print("seed,λ,μ,ρ,tbp,sbp,tavglen,savglen,tavgwait,savgwait")

    driver = ExperimentDriver(config)
    results = []
    for result in driver.sweep():
        print_result(result)
        results.append(result)

    paths = report.write_all(driver, results)
    figure = paths["sweep"][:-len(".csv")] + ".png"
    report.plot_sweep(results, config.parameter, figure)
    print(f"\nWrote {', '.join(paths.values())} and {figure}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
