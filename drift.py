# drift.py
"""
The drift velocity kernel.

For n particles x and m_pos attractors y, the joint set of columns is the
attractors followed by the particles themselves acting as negatives
(m = m_pos + n). Negative scaled distances form an n x m logit matrix that
is softmax-normalized along rows and along columns independently; the
elementwise geometric mean of the two is the affinity A. The drift of
particle i is its attractor-weighted sum scaled by its negative mass,
minus its negative-weighted sum scaled by its attractor mass.

All hot loops are compiled with Numba and write into Workspace buffers.
"""
import numpy as np
from numba import jit
from constants import (
    AFFINITY_EPSILON, SELF_DISTANCE_SENTINEL, SOFTMAX_EPSILON, TEMPERATURE_FLOOR
)
from workspace import Workspace

# --- Data Contracts ---
#
# compute_velocity(x, y, temperature, workspace, out) -> float:
#   - Inputs:
#     - x: (n, 2) float64 particle positions, n >= 1.
#     - y: (m_pos, 2) float64 attractor positions, m_pos >= 0.
#     - temperature: float, floored at TEMPERATURE_FLOOR.
#     - workspace: Workspace, resized to (n, m_pos + n) when needed.
#     - out: (n, 2) float64 array receiving the drift velocities.
#   - Outputs: mean Euclidean norm of the rows of `out`.
#   - Side Effects: Overwrites workspace buffers and `out`.
#   - Invariants: the result does not depend on prior workspace contents.


@jit(nopython=True)
def build_logits(x, y, inv_t, logits):
    """Fills logits[i, j] = -distance * inv_t, attractors first."""
    n = x.shape[0]
    m_pos = y.shape[0]
    for i in range(n):
        xi = x[i, 0]
        yi = x[i, 1]
        for j in range(m_pos):
            dx = xi - y[j, 0]
            dy = yi - y[j, 1]
            logits[i, j] = -np.sqrt(dx * dx + dy * dy) * inv_t
        for k in range(n):
            if k == i:
                dist = SELF_DISTANCE_SENTINEL
            else:
                dx = xi - x[k, 0]
                dy = yi - x[k, 1]
                dist = np.sqrt(dx * dx + dy * dy)
            logits[i, m_pos + k] = -dist * inv_t


@jit(nopython=True)
def row_softmax(logits, out):
    n, m = logits.shape
    for i in range(n):
        row_max = -np.inf
        for j in range(m):
            if logits[i, j] > row_max:
                row_max = logits[i, j]
        total = 0.0
        for j in range(m):
            e = np.exp(logits[i, j] - row_max)
            out[i, j] = e
            total += e
        inv = 1.0 / (total + SOFTMAX_EPSILON)
        for j in range(m):
            out[i, j] *= inv


@jit(nopython=True)
def column_softmax(logits, out):
    n, m = logits.shape
    for j in range(m):
        col_max = -np.inf
        for i in range(n):
            if logits[i, j] > col_max:
                col_max = logits[i, j]
        total = 0.0
        for i in range(n):
            e = np.exp(logits[i, j] - col_max)
            out[i, j] = e
            total += e
        inv = 1.0 / (total + SOFTMAX_EPSILON)
        for i in range(n):
            out[i, j] *= inv


@jit(nopython=True)
def combine_affinity(row_weights, col_weights, m_pos, pos_mass, neg_mass):
    """
    Overwrites row_weights with sqrt(row * col + eps) and accumulates the
    attractor-block and negative-block row sums.
    """
    n, m = row_weights.shape
    for i in range(n):
        sp = 0.0
        sn = 0.0
        for j in range(m):
            a = np.sqrt(row_weights[i, j] * col_weights[i, j] + AFFINITY_EPSILON)
            row_weights[i, j] = a
            if j < m_pos:
                sp += a
            else:
                sn += a
        pos_mass[i] = sp
        neg_mass[i] = sn


@jit(nopython=True)
def aggregate_drift(affinity, x, y, pos_mass, neg_mass, out):
    """
    Writes the cross-scaled drift into `out` and returns the mean speed.

    The attractor sum is scaled by the negative mass and the negative sum
    by the attractor mass.
    """
    n = x.shape[0]
    m_pos = y.shape[0]
    total = 0.0
    for i in range(n):
        neg_scale = neg_mass[i]
        px = 0.0
        py = 0.0
        for j in range(m_pos):
            w = affinity[i, j] * neg_scale
            px += w * y[j, 0]
            py += w * y[j, 1]

        pos_scale = pos_mass[i]
        nx = 0.0
        ny = 0.0
        for k in range(n):
            w = affinity[i, m_pos + k] * pos_scale
            nx += w * x[k, 0]
            ny += w * x[k, 1]

        vx = px - nx
        vy = py - ny
        out[i, 0] = vx
        out[i, 1] = vy
        total += np.sqrt(vx * vx + vy * vy)
    return total / n


def compute_velocity(x: np.ndarray, y: np.ndarray, temperature: float,
                     workspace: Workspace, out: np.ndarray) -> float:
    """
    Computes the drift velocity of every particle into `out`.

    Returns:
        float: Mean velocity magnitude, a diagnostic for status display.
    """
    n = x.shape[0]
    m_pos = y.shape[0]
    workspace.ensure(n, m_pos + n)

    inv_t = 1.0 / max(float(temperature), TEMPERATURE_FLOOR)

    # Numba needs contiguous float64 input; the attractor view is read-only.
    x = np.ascontiguousarray(x, dtype=np.float64)
    y = np.ascontiguousarray(y, dtype=np.float64).reshape(m_pos, 2)

    build_logits(x, y, inv_t, workspace.logits)
    row_softmax(workspace.logits, workspace.row_weights)
    column_softmax(workspace.logits, workspace.col_weights)
    combine_affinity(
        workspace.row_weights, workspace.col_weights, m_pos,
        workspace.pos_mass, workspace.neg_mass
    )
    return float(aggregate_drift(
        workspace.row_weights, x, y, workspace.pos_mass, workspace.neg_mass, out
    ))
