import os

import pandas as pd
import matplotlib.pyplot as plt

PACKET_COLUMNS = ["queue", "packet", "arrival_time", "service_start_time", "service_duration",
                  "departure_time", "wait_duration", "head", "tail", "lost"]
REPLICATION_COLUMNS = ["replication", "lambda", "mu", "load", "analytic_bp", "empirical_bp",
                       "analytic_len", "empirical_len", "analytic_wait", "empirical_wait"]
SWEEP_COLUMNS = ["replications", "value", "lambda", "mu", "load", "analytic_bp", "empirical_bp",
                 "analytic_len", "empirical_len", "analytic_wait", "empirical_wait"]


def aggregate_filename(policy, parameter_index):
    prefix = "rnd" if policy == "random" else "min"
    return f"{prefix}_avg_{parameter_index}.csv"


def to_frame(records, columns):
    return pd.DataFrame(list(records), columns=columns)


def write_packets(records, path):
    frame = to_frame(records, PACKET_COLUMNS)
    frame.to_csv(path, index=False, float_format="%.6f")
    return frame


def write_replications(records, path):
    frame = to_frame(records, REPLICATION_COLUMNS)
    frame.to_csv(path, index=False, float_format="%.6f")
    return frame


def write_sweep(results, path):
    frame = to_frame(results, SWEEP_COLUMNS)
    frame.to_csv(path, index=False, float_format="%.6f")
    return frame


def write_all(driver, results, directory="."):
    """Write sim.csv (if packets were kept), perf.csv and the sweep averages."""
    config = driver.config
    paths = {}
    if config.record_packets:
        paths["packets"] = os.path.join(directory, "sim.csv")
        write_packets(driver.packet_records, paths["packets"])
    paths["replications"] = os.path.join(directory, "perf.csv")
    write_replications(driver.replication_records, paths["replications"])
    paths["sweep"] = os.path.join(directory, aggregate_filename(config.policy, config.parameter_index))
    write_sweep(results, paths["sweep"])
    return paths


def plot_sweep(results, parameter, path=None):
    frame = to_frame(results, SWEEP_COLUMNS)
    plt.figure(figsize=(10, 6))
    plt.plot(frame["value"], frame["analytic_bp"], label="analytic")
    plt.plot(frame["value"], frame["empirical_bp"], "o", label="simulated")
    plt.xlabel(parameter)
    plt.ylabel("Blocking probability")
    plt.title(f"Blocking probability vs {parameter}")
    plt.legend()
    plt.grid(True)
    plt.tight_layout()
    if path is None:
        plt.show()
    else:
        plt.savefig(path)
        plt.close()
    return frame
