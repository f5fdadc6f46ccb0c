#!/usr/bin/env python3
from __future__ import annotations

import argparse
from fractions import Fraction
from typing import List, Optional, Tuple

import ficcal
from ficcal.core.types import EventKind
from ficcal.engines.astro.events import events_between, illumination, satellite_phase
from ficcal.engines.astro.solar_system import SolarSystemSchema


def _need_numpy():
    try:
        import numpy as np
        return np
    except ImportError as e:
        raise RuntimeError('Need numpy. Install: pip install "ficcal[diagnostics]"') from e


def _need_matplotlib():
    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
        return plt
    except ImportError as e:
        raise RuntimeError('Need matplotlib. Install: pip install "ficcal[diagnostics]"') from e


def build_series(np, solar: SolarSystemSchema, start: int, days: int, *, samples_per_day: int = 4):
    """Sample times and the illuminated fraction of every satellite."""
    instants = [Fraction(start) + Fraction(i, samples_per_day) for i in range(days * samples_per_day)]
    t = np.array([float(x) for x in instants])
    out = {}
    for body in solar.satellites:
        out[body.name] = np.array([illumination(satellite_phase(solar, body, x)) for x in instants])
    return t, out


def full_moons(solar: SolarSystemSchema, start: int, days: int) -> List[Tuple[str, float]]:
    events = events_between(solar, start, start + days)
    return [(e.body, float(e.timestamp)) for e in events if e.kind == EventKind.PHASE and e.label == "full"]


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Plot satellite illumination over a range of days.")
    p.add_argument("--solar", default="default", help=f"one of {ficcal.list_solar_systems()}")
    p.add_argument("--start", type=int, default=0, help="first absolute day")
    p.add_argument("--days", type=int, default=120)
    p.add_argument("--outbase", default="phases", help="Output base name (writes .png)")
    args = p.parse_args(argv)

    np = _need_numpy()
    plt = _need_matplotlib()

    solar = ficcal.get_solar_system(args.solar)
    t, series = build_series(np, solar, args.start, args.days)

    fig, ax = plt.subplots(figsize=(9.2, 4.0), constrained_layout=True)
    ax.set_axisbelow(True)
    ax.grid(True, which="major", color="0.88", linewidth=0.7)
    ax.set_xlabel("Absolute day")
    ax.set_ylabel("Illuminated fraction")
    ax.set_ylim(-0.02, 1.02)
    ax.set_title(f"Satellite phases ({solar.name})")

    for name, y in series.items():
        ax.plot(t, y, linewidth=1.4, label=name)
    for name, ts in full_moons(solar, args.start, args.days):
        ax.axvline(ts, color="0.6", linewidth=0.6, linestyle=":")

    ax.legend(loc="center left", bbox_to_anchor=(1.02, 0.5), frameon=False)

    outbase = args.outbase
    fig.savefig(outbase + ".png", dpi=150)
    print(f"Saved: {outbase}.png")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
