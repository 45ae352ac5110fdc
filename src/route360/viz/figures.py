from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence

import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns

from route360.iso import format_label
from route360.models import MarkerPoint


def orthographic(
    lat: np.ndarray, lng: np.ndarray, *, lat0: float, lng0: float
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Project degrees onto a unit-radius globe seen from (lat0, lng0).

    Returns x, y and a mask of points on the visible hemisphere.
    """
    phi = np.radians(lat)
    lam = np.radians(lng)
    phi0 = np.radians(lat0)
    lam0 = np.radians(lng0)
    cos_c = np.sin(phi0) * np.sin(phi) + np.cos(phi0) * np.cos(phi) * np.cos(lam - lam0)
    x = np.cos(phi) * np.sin(lam - lam0)
    y = np.cos(phi0) * np.sin(phi) - np.sin(phi0) * np.cos(phi) * np.cos(lam - lam0)
    return x, y, cos_c >= 0


def _draw_graticule(ax: plt.Axes, *, lat0: float, lng0: float, step: int = 30) -> None:
    fine = np.linspace(-180, 180, 361)
    for lat in range(-60, 61, step):
        x, y, vis = orthographic(np.full_like(fine, lat), fine, lat0=lat0, lng0=lng0)
        ax.plot(np.where(vis, x, np.nan), np.where(vis, y, np.nan), color="0.8", lw=0.6, zorder=1)
    merid = np.linspace(-90, 90, 181)
    for lng in range(-180, 180, step):
        x, y, vis = orthographic(merid, np.full_like(merid, lng), lat0=lat0, lng0=lng0)
        ax.plot(np.where(vis, x, np.nan), np.where(vis, y, np.nan), color="0.8", lw=0.6, zorder=1)


def plot_globe_markers(
    markers: Sequence[MarkerPoint],
    *,
    outpath: Path,
    label: Callable[[str], str] = format_label,
    center: tuple[float, float] = (20.0, 0.0),
    title: str = "Visited countries",
) -> int:
    """
    Draw visited-country markers on an orthographic globe and save it.

    Markers on the far side of the globe are left out. Returns the number of
    markers drawn.
    """
    lat0, lng0 = center
    sns.set_style("white")
    fig, ax = plt.subplots(figsize=(7, 7))
    ax.add_patch(plt.Circle((0, 0), 1.0, color="#15363f", alpha=0.12, zorder=0))
    ax.add_patch(plt.Circle((0, 0), 1.0, fill=False, color="#15363f", lw=1.2, zorder=2))
    _draw_graticule(ax, lat0=lat0, lng0=lng0)

    drawn = 0
    if markers:
        lat = np.array([m.lat for m in markers], dtype=float)
        lng = np.array([m.lng for m in markers], dtype=float)
        x, y, vis = orthographic(lat, lng, lat0=lat0, lng0=lng0)
        ax.scatter(x[vis], y[vis], s=40, color="tab:red", edgecolor="white", zorder=3)
        for m, xi, yi, v in zip(markers, x, y, vis):
            if not v:
                continue
            ax.annotate(label(m.name), (xi, yi), xytext=(4, 4), textcoords="offset points", fontsize=8, zorder=4)
            drawn += 1

    ax.set_xlim(-1.05, 1.05)
    ax.set_ylim(-1.05, 1.05)
    ax.set_aspect("equal")
    ax.axis("off")
    ax.set_title(f"{title} ({drawn} of {len(markers)} markers in view)")
    outpath.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(outpath, dpi=200)
    plt.close(fig)
    return drawn


def plot_trip_map(
    markers: Sequence[MarkerPoint],
    *,
    outpath: Path,
    title: str = "Trip map",
    pad: float = 0.3,
) -> None:
    """
    Plain lat/lng map of trip pins, framed to fit all pins with `pad` of the
    span added on each side.
    """
    sns.set_style("whitegrid")
    fig, ax = plt.subplots(figsize=(8, 5))
    if markers:
        lat = np.array([m.lat for m in markers], dtype=float)
        lng = np.array([m.lng for m in markers], dtype=float)
        ax.scatter(lng, lat, s=50, color="tab:blue", zorder=3)
        for m in markers:
            ax.annotate(m.name, (m.lng, m.lat), xytext=(4, 4), textcoords="offset points", fontsize=8)
        span_lng = max(float(np.ptp(lng)), 0.5)
        span_lat = max(float(np.ptp(lat)), 0.5)
        ax.set_xlim(lng.min() - pad * span_lng, lng.max() + pad * span_lng)
        ax.set_ylim(lat.min() - pad * span_lat, lat.max() + pad * span_lat)
    else:
        ax.set_xlim(-180, 180)
        ax.set_ylim(-90, 90)
    ax.set_title(title)
    ax.set_xlabel("Longitude")
    ax.set_ylabel("Latitude")
    outpath.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(outpath, dpi=200)
    plt.close(fig)
