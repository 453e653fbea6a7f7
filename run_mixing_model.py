"""
run_mixing_model.py
===================
Linear Vertical Mixing Model for Drill Cuttings
===============================================

Simulates observations made from drill cuttings: cuttings are mixed over a
20 m interval with contributions decaying linearly uphole, from 100% at the
base of the interval to 0% at its top.  Based on the vertical mixing model
of the IODP Exp 338 shipboard scientists.

Scenarios:
    lithology  — discrete sand and silty clay beds (% occurrence)
    fault      — fault zones with scaley fabric (% occurrence)
    clay       — graded and alternating beds (total clay wt%)

Usage:
    python run_mixing_model.py                              # all scenarios
    python run_mixing_model.py --only_models clay           # one scenario
    python run_mixing_model.py --seed 7 --n 5000            # smaller ensembles
    python run_mixing_model.py --interval 30                # wider mixing
    python run_mixing_model.py --no_plots                   # summary only

Output structure:
    outputs/
        00_mixing_overview.png
        01_lithology.png
        02_fault.png
        03_clay_wt_pct.png
"""

import sys
import argparse
import time
from pathlib import Path

# Allow running from project root
sys.path.insert(0, str(Path(__file__).parent))

from cuttings.mixing_kernel  import MIX_INTERVAL, N_CUTTINGS, DEFAULT_SEED
from cuttings.mixing_engine  import CuttingsMixingModel, SCENARIOS, mixing_summary
from cuttings.plotting import (
    plot_lithology_model, plot_fault_model, plot_clay_model,
    plot_mixing_overview,
)

# ─────────────────────────────────────────────────────────────────────────────
# DEFAULTS
# ─────────────────────────────────────────────────────────────────────────────

DEFAULT_OUT_DIR  = './outputs'
DEFAULT_STRIDES  = [1, 10]

FIGURES = {
    'lithology': ('01_lithology.png',   plot_lithology_model),
    'fault'    : ('02_fault.png',       plot_fault_model),
    'clay'     : ('03_clay_wt_pct.png', plot_clay_model),
}


# ─────────────────────────────────────────────────────────────────────────────
# HELPERS
# ─────────────────────────────────────────────────────────────────────────────

def banner(text: str, char: str = '═', width: int = 68):
    print(f"\n{char*width}")
    print(f"  {text}")
    print(f"{char*width}")


def phase_header(n: int, title: str):
    print(f"\n  ┌── Phase {n}: {title} {'─'*(55 - len(title))}")


def phase_done(t0: float):
    print(f"  └── done  ({time.time() - t0:.1f}s)")


def select_models(only: list, skip: list) -> list:
    if only:
        return [s for s in SCENARIOS if s in only]
    return [s for s in SCENARIOS if s not in skip]


# ─────────────────────────────────────────────────────────────────────────────
# PIPELINE
# ─────────────────────────────────────────────────────────────────────────────

def run(models: list, out_dir: str = DEFAULT_OUT_DIR,
        interval: int = MIX_INTERVAL, n: int = N_CUTTINGS,
        seed: int = DEFAULT_SEED, strides: list = DEFAULT_STRIDES,
        plots: bool = True) -> dict:
    """
    Run the mixing model for the selected scenarios and render figures.

    Returns
    -------
    results : dict keyed by scenario, see CuttingsMixingModel.run()
    """
    # ── Phase 1: mixing ──────────────────────────────────────────────────
    t0 = time.time()
    phase_header(1, 'Vertical Mixing')
    model   = CuttingsMixingModel(interval=interval, n=n, seed=seed,
                                  strides=strides, verbose=True)
    results = model.run(models)
    phase_done(t0)

    # ── Phase 2: truth vs observed ───────────────────────────────────────
    t0 = time.time()
    phase_header(2, 'Truth vs Observed Cuttings')
    print(f"\n{mixing_summary(results).to_string()}\n")
    phase_done(t0)

    # ── Phase 3: figures ─────────────────────────────────────────────────
    if plots:
        t0 = time.time()
        phase_header(3, 'Figures')
        out = Path(out_dir)
        out.mkdir(parents=True, exist_ok=True)
        coarse = max(strides)
        for scenario in models:
            fname, plot_fn = FIGURES[scenario]
            plot_fn(results[scenario], stride=coarse,
                    save_path=str(out / fname))
        plot_mixing_overview(results, stride=coarse,
                             save_path=str(out / '00_mixing_overview.png'))
        phase_done(t0)

    return results


# ─────────────────────────────────────────────────────────────────────────────
# MAIN
# ─────────────────────────────────────────────────────────────────────────────

def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Linear Vertical Mixing Model for Drill Cuttings',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__)

    parser.add_argument('--out_dir', default=DEFAULT_OUT_DIR,
                        help=f'Output directory  (default: {DEFAULT_OUT_DIR})')
    parser.add_argument('--only_models', nargs='+', choices=SCENARIOS, default=[],
                        help='Run only these scenarios')
    parser.add_argument('--skip_models', nargs='+', choices=SCENARIOS, default=[],
                        help='Scenarios to skip')
    parser.add_argument('--interval', type=int, default=MIX_INTERVAL,
                        help=f'Mixing interval in metres (default: {MIX_INTERVAL})')
    parser.add_argument('--n', type=int, default=N_CUTTINGS,
                        help=f'Cuttings fragments per depth (default: {N_CUTTINGS})')
    parser.add_argument('--seed', type=int, default=DEFAULT_SEED,
                        help=f'Random seed for cuttings draws (default: {DEFAULT_SEED})')
    parser.add_argument('--strides', nargs='+', type=int, default=DEFAULT_STRIDES,
                        help='Observation spacings in metres (default: 1 10)')
    parser.add_argument('--no_plots', action='store_true',
                        help='Skip figure rendering')

    args = parser.parse_args(argv)

    models = select_models(args.only_models, args.skip_models)
    if not models:
        print("\n  ✗  No scenarios selected. Exiting.")
        sys.exit(1)

    banner("Linear Vertical Mixing Model — Drill Cuttings")
    print(f"  Scenarios : {', '.join(models)}")
    print(f"  Interval  : {args.interval} m")
    print(f"  Fragments : {args.n} per depth")
    print(f"  Seed      : {args.seed}")
    print(f"  Strides   : {args.strides} m")
    if not args.no_plots:
        print(f"  Output    : {args.out_dir}")

    run(models, out_dir=args.out_dir, interval=args.interval, n=args.n,
        seed=args.seed, strides=args.strides, plots=not args.no_plots)

    banner("Mixing Model Complete ✅")
    print()


if __name__ == '__main__':
    main()
