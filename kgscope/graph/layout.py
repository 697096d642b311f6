"""
Force-directed layout engine.

Iterative velocity-Verlet style simulation with three forces per tick:
- link: spring along each edge toward a target separation
- charge: pairwise repulsion between every node pair (exact, O(n^2))
- center: translates the layout so its centroid sits on the canvas center

Nodes and edges live in flat numpy arrays addressed by index; positions are
copied back into the PositionedNode list after every tick so each intermediate
frame is a valid render target.
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import Dict, Iterator, List, Optional, Sequence

import numpy as np

from .kg_core import GraphEdge, GraphNode, PositionedNode, LEVEL_CLASS, SEMANTIC_LEVELS

logger = logging.getLogger(__name__)

# Spring rest lengths per semantic level; aggregate graphs are sparser and need more spread.
LINK_DISTANCE = {1: 300.0, 2: 150.0}

INITIAL_RADIUS = 10.0
INITIAL_ANGLE = math.pi * (3 - math.sqrt(5))


@dataclass(frozen=True)
class ForceParams:
    """Force and cooling parameters for one simulation."""
    link_distance: float = LINK_DISTANCE[2]
    charge_strength: float = -300.0
    center_strength: float = 1.0
    alpha: float = 1.0
    alpha_min: float = 0.001
    alpha_decay: Optional[float] = None  # derived from alpha_min when None
    alpha_target: float = 0.0
    velocity_decay: float = 0.4
    distance_min: float = 1.0
    max_iterations: int = 300
    velocity_tolerance: Optional[float] = None
    seed: int = 1

    def __post_init__(self):
        if self.link_distance <= 0:
            raise ValueError("link_distance must be positive")
        if not 0 < self.alpha_min < 1:
            raise ValueError("alpha_min must be between 0 and 1")
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be >= 1")
        if not 0 <= self.velocity_decay <= 1:
            raise ValueError("velocity_decay must be between 0 and 1")

    @property
    def decay(self) -> float:
        if self.alpha_decay is not None:
            return self.alpha_decay
        return 1 - self.alpha_min ** (1 / 300)

    @classmethod
    def for_level(cls, level: int, **overrides) -> "ForceParams":
        if level not in SEMANTIC_LEVELS:
            raise ValueError(f"Semantic level must be 1 or 2, got {level!r}")
        return replace(cls(link_distance=LINK_DISTANCE[level]), **overrides)


class _LCG:
    """Seeded linear congruential generator used for coincident-point jiggle."""

    _A = 1664525
    _C = 1013904223
    _M = 4294967296

    def __init__(self, seed: int = 1):
        self._state = seed

    def __call__(self) -> float:
        self._state = (self._A * self._state + self._C) % self._M
        return self._state / self._M

    def jiggle(self) -> float:
        return (self() - 0.5) * 1e-6


class ForceLayout:
    """
    Incremental force simulation over a built graph.

    Usage:
        sim = ForceLayout(nodes, edges, 1000, 800, level=2)
        for frame in sim.iter_ticks():
            draw(frame)
    """

    def __init__(
        self,
        nodes: Sequence[GraphNode],
        edges: Sequence[GraphEdge],
        canvas_width: float,
        canvas_height: float,
        level: int = LEVEL_CLASS,
        params: Optional[ForceParams] = None,
    ):
        if canvas_width <= 0 or canvas_height <= 0:
            raise ValueError("Canvas dimensions must be positive")
        self.params = params or ForceParams.for_level(level)
        self.center = (canvas_width / 2.0, canvas_height / 2.0)
        self.alpha = self.params.alpha
        self.iterations = 0
        self._random = _LCG(self.params.seed)

        n = len(nodes)
        index: Dict[str, int] = {node.id: i for i, node in enumerate(nodes)}
        i = np.arange(n, dtype=float)
        radius = INITIAL_RADIUS * np.sqrt(0.5 + i)
        angle = i * INITIAL_ANGLE
        self.x = self.center[0] + radius * np.cos(angle)
        self.y = self.center[1] + radius * np.sin(angle)
        self.vx = np.zeros(n)
        self.vy = np.zeros(n)

        src: List[int] = []
        tgt: List[int] = []
        for edge in edges:
            s = index.get(edge.source)
            t = index.get(edge.target)
            if s is None or t is None:
                logger.warning(f"Layout skipping edge with unknown endpoint: {edge.source} -> {edge.target}")
                continue
            if s == t:
                continue
            src.append(s)
            tgt.append(t)
        self.link_source = np.array(src, dtype=int)
        self.link_target = np.array(tgt, dtype=int)

        degree = np.zeros(n)
        np.add.at(degree, self.link_source, 1)
        np.add.at(degree, self.link_target, 1)
        if len(src):
            ds = degree[self.link_source]
            dt = degree[self.link_target]
            self.link_bias = ds / (ds + dt)
            self.link_strength = 1.0 / np.minimum(ds, dt)
        else:
            self.link_bias = np.zeros(0)
            self.link_strength = np.zeros(0)

        self.positioned: List[PositionedNode] = [
            PositionedNode(node, float(self.x[k]), float(self.y[k])) for k, node in enumerate(nodes)
        ]

    def __len__(self) -> int:
        return len(self.positioned)

    @property
    def energy(self) -> float:
        """Kinetic energy of the current velocities."""
        return float(0.5 * np.sum(self.vx ** 2 + self.vy ** 2))

    @property
    def converged(self) -> bool:
        if not self.positioned:
            return True
        if self.alpha < self.params.alpha_min or self.iterations >= self.params.max_iterations:
            return True
        tol = self.params.velocity_tolerance
        if tol is not None and self.iterations > 0:
            return bool(np.max(np.hypot(self.vx, self.vy)) < tol)
        return False

    def _apply_links(self, alpha: float) -> None:
        distance = self.params.link_distance
        x, y, vx, vy = self.x, self.y, self.vx, self.vy
        # Sequential: each link sees velocities already updated by earlier links.
        for k in range(len(self.link_source)):
            s = self.link_source[k]
            t = self.link_target[k]
            dx = x[t] + vx[t] - x[s] - vx[s]
            dy = y[t] + vy[t] - y[s] - vy[s]
            if dx == 0:
                dx = self._random.jiggle()
            if dy == 0:
                dy = self._random.jiggle()
            length = math.sqrt(dx * dx + dy * dy)
            scale = (length - distance) / length * alpha * self.link_strength[k]
            dx *= scale
            dy *= scale
            bias = self.link_bias[k]
            vx[t] -= dx * bias
            vy[t] -= dy * bias
            vx[s] += dx * (1 - bias)
            vy[s] += dy * (1 - bias)

    def _apply_charge(self, alpha: float) -> None:
        n = len(self.x)
        if n < 2:
            return
        dx = self.x[np.newaxis, :] - self.x[:, np.newaxis]
        dy = self.y[np.newaxis, :] - self.y[:, np.newaxis]
        off_diagonal = ~np.eye(n, dtype=bool)
        for delta in (dx, dy):
            coincident = (delta == 0) & off_diagonal
            if coincident.any():
                delta[coincident] = [self._random.jiggle() for _ in range(int(coincident.sum()))]
        dist2 = dx * dx + dy * dy
        min2 = self.params.distance_min ** 2
        dist2 = np.where(dist2 < min2, np.sqrt(min2 * dist2), dist2)
        np.fill_diagonal(dist2, np.inf)
        weight = self.params.charge_strength * alpha / dist2
        self.vx += np.sum(dx * weight, axis=1)
        self.vy += np.sum(dy * weight, axis=1)

    def _apply_center(self) -> None:
        if not len(self.x):
            return
        strength = self.params.center_strength
        self.x -= (self.x.mean() - self.center[0]) * strength
        self.y -= (self.y.mean() - self.center[1]) * strength

    def tick(self) -> List[PositionedNode]:
        """Advance the simulation by one step and return the updated positions."""
        p = self.params
        self.alpha += (p.alpha_target - self.alpha) * p.decay
        self._apply_links(self.alpha)
        self._apply_charge(self.alpha)
        self._apply_center()

        keep = 1 - p.velocity_decay
        self.vx *= keep
        self.vy *= keep
        self.x += self.vx
        self.y += self.vy
        self.iterations += 1

        for k, pos in enumerate(self.positioned):
            pos.x = float(self.x[k])
            pos.y = float(self.y[k])
        return self.positioned

    def iter_ticks(self) -> Iterator[List[PositionedNode]]:
        """Yield positions after every tick until the simulation settles."""
        while not self.converged:
            yield self.tick()
        logger.debug(f"Layout settled after {self.iterations} ticks (alpha={self.alpha:.4f})")

    def run(self) -> List[PositionedNode]:
        for _ in self.iter_ticks():
            pass
        return self.positioned


def layout(
    nodes: Sequence[GraphNode],
    edges: Sequence[GraphEdge],
    canvas_width: float,
    canvas_height: float,
    level: int,
    params: Optional[ForceParams] = None,
) -> List[PositionedNode]:
    """Run a simulation to convergence and return positioned nodes."""
    return ForceLayout(nodes, edges, canvas_width, canvas_height, level, params).run()
