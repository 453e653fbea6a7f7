"""
cuttings/plotting.py
====================
Plotting Library
Drill Cuttings Mixing Model

Contains plotting functions for:
    Lithology : hypothetical composition vs simulated cuttings (1 m, 10 m)
    Fault     : scaley-fabric occurrence vs simulated cuttings (1 m, 10 m)
    Clay wt%  : hypothetical wt% vs bulk-averaged cuttings (1 m, 10 m)
    Overview  : all three scenarios side by side (nine tracks)

Every track shares a depth axis increasing downward with the x axis on top,
and starts at the first fully mixed depth.  Functions only read the result
dicts produced by CuttingsMixingModel.

Usage:
    from cuttings.plotting import plot_mixing_overview
    plot_mixing_overview(results, save_path='overview.png')
"""

import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from pathlib import Path

# ─────────────────────────────────────────────────────────────────────────────
# STYLE CONSTANTS
# ─────────────────────────────────────────────────────────────────────────────

BG_COLOR   = '#ffffff'
PANEL_BG   = '#f7f8fa'
GRID_COLOR = '#d0d5dd'
TEXT_COLOR = '#1a1f2e'
EDGE_COLOR = '#737373'

CLASS_COLORS = {
    'Sandstone'           : '#b3a900',   # mustard yellow
    'Silty Claystone'     : '#5f4b3c',   # brown
    'Fine Silty Claystone': '#a48677',   # tan
    'Scaley Fabric'       : '#333333',
}
DEFAULT_CLASS_COLOR = '#888888'

TRACE_STYLES = {
    'truth'   : ('Hypothetical Composition',              '#1a1f2e'),
    'mixed'   : ('Simulated Recovered Cuttings, every 1m', '#c0392b'),
    'observed': ('Simulated Observations, every {s}m',     '#0077b6'),
}

WT_PCT_XLIM = (0, 20)


# ─────────────────────────────────────────────────────────────────────────────
# HELPER UTILITIES
# ─────────────────────────────────────────────────────────────────────────────

def _new_fig(ncols=1, figsize=(16, 8), suptitle=''):
    fig, axes = plt.subplots(1, ncols, figsize=figsize, sharey=True)
    fig.patch.set_facecolor(BG_COLOR)
    if suptitle:
        fig.suptitle(suptitle, color=TEXT_COLOR, fontsize=12,
                     fontweight='bold', y=1.01)
    return fig, np.atleast_1d(axes)


def _style_track(ax, title='', xlabel='', ylabel='', grid=True):
    ax.set_facecolor(PANEL_BG)
    ax.set_title(title, color=TEXT_COLOR, fontsize=9, fontweight='bold')
    ax.set_xlabel(xlabel, color=TEXT_COLOR, fontsize=8)
    ax.set_ylabel(ylabel, color=TEXT_COLOR, fontsize=8)
    ax.xaxis.set_label_position('top')
    ax.xaxis.tick_top()
    ax.tick_params(colors=TEXT_COLOR, labelsize=7, direction='out', length=2)
    for sp in ax.spines.values():
        sp.set_color(GRID_COLOR)
    if grid:
        ax.grid(True, color=GRID_COLOR, alpha=0.7, linestyle='--', linewidth=0.5)


def _depth_limits(ax, top: int, base: int):
    ax.set_ylim(base + 0.5, top - 0.5)


def _class_color(name: str) -> str:
    return CLASS_COLORS.get(name, DEFAULT_CLASS_COLOR)


def _legend(ax, **kw):
    ax.legend(fontsize=7, loc='upper center', bbox_to_anchor=(0.5, -0.02),
              facecolor=PANEL_BG, labelcolor=TEXT_COLOR,
              edgecolor=GRID_COLOR, **kw)


def _save(fig, path, dpi=160):
    if path:
        plt.tight_layout()
        plt.savefig(path, dpi=dpi, bbox_inches='tight',
                    facecolor=fig.get_facecolor())
        print(f"  → {Path(path).name}")
    plt.close(fig)


# ─────────────────────────────────────────────────────────────────────────────
# SINGLE TRACKS
# ─────────────────────────────────────────────────────────────────────────────

def plot_percent_track(ax, pct_df, class_names, start_depth: int = 1,
                       bar_height: float = 1.0, title: str = '',
                       ylabel: str = 'Model Depth (m)'):
    """
    Stacked horizontal % occurrence bars, one bar per depth.

    pct_df      : DataFrame with DEPTH and one column per class name
    class_names : class names in stacking order
    """
    df    = pct_df[pct_df['DEPTH'] >= start_depth]
    depth = df['DEPTH'].values
    left  = np.zeros(len(df))
    edge  = EDGE_COLOR if bar_height <= 1 else 'none'

    for name in class_names:
        width = np.nan_to_num(df[name].values.astype(float))
        ax.barh(depth, width, left=left, height=bar_height,
                color=_class_color(name), edgecolor=edge, linewidth=0.2,
                label=name)
        left = left + width

    _style_track(ax, title=title, xlabel='% Occurrence', ylabel=ylabel,
                 grid=False)
    ax.set_xlim(0, 100)
    _depth_limits(ax, start_depth, int(pct_df['DEPTH'].max()))
    _legend(ax)


def plot_weight_percent_track(ax, depth, values, kind: str = 'truth',
                              stride: int = 1, start_depth: int = 1,
                              base_depth: int = None, title: str = '',
                              ylabel: str = 'Model Depth (m)'):
    """wt% trace with point markers; `kind` picks label and colour."""
    depth  = np.asarray(depth)
    values = np.asarray(values, dtype=float)
    keep   = depth >= start_depth
    label, color = TRACE_STYLES[kind]
    label = label.format(s=stride)

    ax.plot(values[keep], depth[keep], '.-', color=color, lw=0.9,
            markersize=4 if kind != 'observed' else 8, label=label)

    _style_track(ax, title=title, xlabel='Total Clay Wt %', ylabel=ylabel)
    ax.set_xlim(*WT_PCT_XLIM)
    _depth_limits(ax, start_depth, int(base_depth or depth.max()))
    _legend(ax)


# ─────────────────────────────────────────────────────────────────────────────
# SCENARIO FIGURES
# ─────────────────────────────────────────────────────────────────────────────

def _categorical_tracks(axes, result: dict, stride: int = 10):
    v     = result['interval']
    names = list(result['class_names'].values())

    plot_percent_track(axes[0], result['truth_pct'], names, start_depth=v,
                       title='Hypothetical\nComposition')
    plot_percent_track(axes[1], result['observed'].get(1, result['mixed_pct']),
                       names, start_depth=v,
                       title='Simulated Recovered\nCuttings, every 1m',
                       ylabel='')
    if stride in result['observed']:
        plot_percent_track(axes[2], result['observed'][stride], names,
                           start_depth=v, bar_height=2.0,
                           title=f'Simulated Cuttings\nObservations, every {stride}m',
                           ylabel='')


def _continuous_tracks(axes, result: dict, stride: int = 10):
    v     = result['interval']
    depth = result['depth']
    base  = int(depth.max())

    plot_weight_percent_track(axes[0], depth, result['truth'], 'truth',
                              start_depth=v, base_depth=base,
                              title='Hypothetical Composition\nand Recovered Cuttings')
    plot_weight_percent_track(axes[1], depth, result['mixed'], 'mixed',
                              start_depth=v, base_depth=base,
                              title='Hypothetical Composition\nand Recovered Cuttings',
                              ylabel='')
    if stride in result['observed']:
        d_s, v_s = result['observed'][stride]
        plot_weight_percent_track(axes[2], d_s, v_s, 'observed', stride=stride,
                                  start_depth=v, base_depth=base,
                                  title=f'Simulated Cuttings\nObservations, every {stride}m',
                                  ylabel='')


def plot_lithology_model(result: dict, stride: int = 10, save_path: str = None):
    """Discrete beds: hypothetical lithology vs simulated cuttings."""
    fig, axes = _new_fig(3, figsize=(9, 9),
                         suptitle='Lithology  —  Discrete Beds')
    _categorical_tracks(axes, result, stride)
    _save(fig, save_path)
    return fig


def plot_fault_model(result: dict, stride: int = 10, save_path: str = None):
    """Fault zones: scaley-fabric occurrence vs simulated cuttings."""
    fig, axes = _new_fig(3, figsize=(9, 9),
                         suptitle='Fault Zones  —  Scaley Fabric')
    _categorical_tracks(axes, result, stride)
    _save(fig, save_path)
    return fig


def plot_clay_model(result: dict, stride: int = 10, save_path: str = None):
    """Graded / alternating beds: clay wt% vs bulk-averaged cuttings."""
    fig, axes = _new_fig(3, figsize=(9, 9),
                         suptitle='Clay Wt%  —  Graded & Alternating Beds')
    _continuous_tracks(axes, result, stride)
    _save(fig, save_path)
    return fig


# ─────────────────────────────────────────────────────────────────────────────
# OVERVIEW
# ─────────────────────────────────────────────────────────────────────────────

def plot_mixing_overview(results: dict, stride: int = 10,
                         save_path: str = None):
    """
    Nine-track comparison of every scenario present in `results`.

    Parameters
    ----------
    results : output of CuttingsMixingModel.run()
    stride  : coarse observation spacing shown in the third track
    """
    order = [s for s in ('lithology', 'fault', 'clay') if s in results]
    fig, axes = _new_fig(3 * len(order), figsize=(1.8 * 3 * len(order), 8),
                         suptitle='Linear Vertical Mixing of Drill Cuttings')

    for i, scenario in enumerate(order):
        res = results[scenario]
        trio = axes[3 * i: 3 * i + 3]
        if res['kind'] == 'categorical':
            _categorical_tracks(trio, res, stride)
        else:
            _continuous_tracks(trio, res, stride)
        if i > 0:
            trio[0].set_ylabel('')

    _save(fig, save_path)
    return fig
