"""
experiments/run_experiments.py

Experiment harness that loads the baseline config, applies scenario overrides,
runs multiple replications, and reports KPIs with confidence intervals.
The script is intentionally lightweight so we can tweak scenarios or plug in
other analysis pipelines as needed.

Run from the repository root:
    python -m experiments.run_experiments
"""

from __future__ import annotations
import copy, math, os
from statistics import mean, stdev
from typing import Callable, Dict, List, Optional

import yaml
from scipy.stats import t

from bank_sim import SimulationConfig, SimulationResult, configure_from_env, run_simulation
from bank_sim.entities import ServiceType
from bank_sim.metrics import sample_queue_lengths, sample_times
from experiments.scenarios import SCENARIOS

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def load_cfg(path: Optional[str] = None) -> Dict:
    with open(path or os.path.join(ROOT, "config", "baseline.yaml"), "r") as f:
        return yaml.safe_load(f) or {}


def apply_overrides(cfg: Dict, overrides: Dict) -> Dict:
    """Apply scenario overrides (recursive merge) on top of the base config."""
    new = copy.deepcopy(cfg)

    def _merge(dst: Dict, src: Dict):
        for key, val in src.items():
            if isinstance(val, dict) and isinstance(dst.get(key), dict):
                _merge(dst[key], val)
            else:
                dst[key] = copy.deepcopy(val)

    _merge(new, overrides)
    return new


def mean_ci(values: List[float], confidence_level: float) -> tuple[float, float]:
    """Return (mean, half-width) using a t-distribution critical value."""
    if not values:
        return 0.0, 0.0
    mu = mean(values)
    n = len(values)
    if n < 2:
        return mu, 0.0
    level = min(max(confidence_level, 0.0), 0.999999)
    alpha = 1.0 - level
    tcrit = t.ppf(1 - alpha / 2.0, n - 1)
    half = tcrit * (stdev(values) / math.sqrt(n))
    return mu, float(half)


def sample_stddev(values: List[float]) -> float:
    """Return sample standard deviation or 0 if insufficient data."""
    if len(values) < 2:
        return 0.0
    return stdev(values)


def series(results: List[SimulationResult], extractor: Callable[[SimulationResult], float]) -> List[float]:
    """Collect a numeric series from each replication result."""
    return [float(extractor(res)) for res in results]


def run_replications(cfg: Dict, replications: int) -> List[SimulationResult]:
    """
    Run `replications` independent days. When the config carries a seed, the
    seed is advanced per replication so runs stay iid but reproducible.
    """
    base_seed = cfg.get("sim", {}).get("seed")
    results = []
    for rep in range(replications):
        rep_cfg = copy.deepcopy(cfg)
        if base_seed is not None:
            rep_cfg.setdefault("sim", {})["seed"] = base_seed + rep
        results.append(run_simulation(SimulationConfig.from_dict(rep_cfg)))
    return results


def queue_length_curve(results: List[SimulationResult], service_type: ServiceType) -> List[Dict[str, float]]:
    """Average the sampled waiting-line length across replications at each grid point."""
    if not results:
        return []
    sim_cfg = results[0].config
    grid = sample_times(sim_cfg.duration_minutes, sim_cfg.queue_sample_minutes)
    per_rep = [
        sample_queue_lengths(res.customers, service_type, sim_cfg.duration_minutes, sim_cfg.queue_sample_minutes)
        for res in results
    ]
    return [
        {"time_minutes": tm, "queue_length": sum(rep[i] for rep in per_rep) / len(per_rep)}
        for i, tm in enumerate(grid)
    ]


def plot_queue_lengths(curves: Dict[str, List[Dict[str, float]]], scenario_name: str):
    """
    Persist a PNG plot of the mean waiting-line length per counter line
    versus time for one scenario.
    """
    if not any(curves.values()):
        return None
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    colors = {"high": "#2563eb", "low": "#d97706"}
    plt.figure(figsize=(9, 5))
    for name, curve in curves.items():
        x = [pt["time_minutes"] for pt in curve]
        y = [pt["queue_length"] for pt in curve]
        plt.plot(x, y, label=f"{name} counter", color=colors.get(name))
    plt.xlabel("Time (minutes)")
    plt.ylabel("Customers waiting (mean across replications)")
    plt.title(f"{scenario_name}: queue length over the day")
    plt.legend()
    plt.grid(True, linestyle="--", alpha=0.4)
    out_dir = os.path.join(ROOT, "experiments", "output")
    os.makedirs(out_dir, exist_ok=True)
    safe_name = scenario_name.lower().replace(" ", "_")
    out_path = os.path.join(out_dir, f"{safe_name}_queue_length.png")
    plt.tight_layout()
    plt.savefig(out_path, dpi=160)
    plt.close()
    return out_path


def main():
    """Entry point: drive all scenarios, replications, and report KPIs."""
    configure_from_env()
    cfg = load_cfg()
    exp_cfg = cfg.get("experiments", {})
    replications = max(1, int(exp_cfg.get("replications", 1)))
    confidence = float(exp_cfg.get("confidence_level", 0.95))
    make_plots = bool(exp_cfg.get("plot_queue_lengths", False))
    level_pct = confidence * 100.0

    for sc in SCENARIOS:
        sc_cfg = apply_overrides(cfg, sc["overrides"])
        results = run_replications(sc_cfg, replications)

        # Collect KPI distributions across replications so we can report means with CIs.
        wait = mean_ci(series(results, lambda r: r.metrics.avg_wait_time), confidence)
        max_wait = mean_ci(series(results, lambda r: r.metrics.max_wait_time), confidence)
        walkin_wait = mean_ci(series(results, lambda r: r.metrics.avg_wait_time_walk_in), confidence)
        reserved_wait = mean_ci(series(results, lambda r: r.metrics.avg_wait_time_reserved), confidence)
        benefit = mean_ci(series(results, lambda r: r.metrics.reserved_benefit), confidence)
        throughput = mean_ci(series(results, lambda r: r.metrics.throughput), confidence)
        throughput_sd = sample_stddev(series(results, lambda r: r.metrics.throughput))
        q_high = mean_ci(series(results, lambda r: r.metrics.avg_queue_length_high), confidence)
        q_low = mean_ci(series(results, lambda r: r.metrics.avg_queue_length_low), confidence)
        happy = mean_ci(series(results, lambda r: r.metrics.sentiment.happy), confidence)
        neutral = mean_ci(series(results, lambda r: r.metrics.sentiment.neutral), confidence)
        angry = mean_ci(series(results, lambda r: r.metrics.sentiment.angry), confidence)
        utilizations = {}
        for service_type in ServiceType:
            n_servers = len(results[0].metrics.server_stats(service_type))
            for idx in range(n_servers):
                row = results[0].metrics.server_stats(service_type)[idx]
                vals = series(results, lambda r: r.metrics.server_stats(service_type)[idx].utilization)
                utilizations[row.label] = round(mean(vals) * 100.0, 1)

        print(f"Scenario: {sc['name']} (replications={replications}, {level_pct:.1f}% CI)")
        print(f"  Throughput/day: {throughput[0]:.1f} ± {throughput[1]:.1f} (sd {throughput_sd:.1f})")
        print(f"  Avg wait: {wait[0]:.2f} ± {wait[1]:.2f} min")
        print(f"  Max wait: {max_wait[0]:.2f} ± {max_wait[1]:.2f} min")
        print(f"  Avg wait walk-in: {walkin_wait[0]:.2f} ± {walkin_wait[1]:.2f} min")
        print(f"  Avg wait reserved: {reserved_wait[0]:.2f} ± {reserved_wait[1]:.2f} min")
        print(f"  Reserved benefit: {benefit[0]:.2f} ± {benefit[1]:.2f} min")
        print(f"  Avg queue length high: {q_high[0]:.2f} ± {q_high[1]:.2f}")
        print(f"  Avg queue length low: {q_low[0]:.2f} ± {q_low[1]:.2f}")
        print(f"  Sentiment happy/neutral/angry: {happy[0]:.1f} / {neutral[0]:.1f} / {angry[0]:.1f}"
              f" (± {happy[1]:.1f} / {neutral[1]:.1f} / {angry[1]:.1f})")
        print(f"  Server utilization (mean % busy): {utilizations}")
        if make_plots:
            curves = {
                "high": queue_length_curve(results, ServiceType.HIGH_COUNTER),
                "low": queue_length_curve(results, ServiceType.LOW_COUNTER),
            }
            plot_path = plot_queue_lengths(curves, sc["name"])
            if plot_path:
                print(f"  Queue length plot saved to: {plot_path}")
        print("-")


if __name__ == "__main__":
    main()
