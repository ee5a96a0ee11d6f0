"""Decoding of direction genomes into segments.

Every pixel has at most one outgoing link, so following links from any pixel
ends either on a ``NONE`` root or inside a cycle. Each root or cycle, together
with every chain draining into it, forms one segment.
"""

from __future__ import annotations

import numpy as np


def link_targets(genes: np.ndarray, neighbor_table: np.ndarray) -> np.ndarray:
    """Return the pixel each pixel links to (itself for ``NONE``)."""
    targets = neighbor_table[np.arange(len(genes)), genes.astype(np.int64)]
    if np.any(targets < 0):
        bad = int(np.flatnonzero(targets < 0)[0])
        raise ValueError(f"Pixel {bad} points off the grid (direction {int(genes[bad])}).")
    return targets


def decode_segments(genes: np.ndarray, neighbor_table: np.ndarray) -> np.ndarray:
    """Return a segment label per pixel, numbered in discovery order.

    The walk stamps every pixel it passes with the id of the walk, so reaching
    an already-stamped pixel of the current walk means a cycle was closed. Each
    pixel is walked over once, so the whole decoding is linear in pixel count.
    """
    targets = link_targets(genes, neighbor_table).tolist()
    n = len(targets)
    labels = [-1] * n
    stamp = [-1] * n
    next_label = 0

    for start in range(n):
        if labels[start] >= 0:
            continue
        path = []
        node = start
        while labels[node] < 0 and stamp[node] != start:
            stamp[node] = start
            path.append(node)
            node = targets[node]

        if labels[node] >= 0:
            label = labels[node]
        else:
            # closed a cycle (or hit a root pointing at itself)
            label = next_label
            next_label += 1
        for p in path:
            labels[p] = label

    return np.asarray(labels, dtype=np.int64)


def segments_from_labels(labels: np.ndarray) -> list[np.ndarray]:
    """Group pixel indices by label; the result is ordered by label."""
    if len(labels) == 0:
        return []
    order = np.argsort(labels, kind="stable")
    counts = np.bincount(labels)
    return np.split(order, np.cumsum(counts)[:-1])
