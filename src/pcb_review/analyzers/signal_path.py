"""Net membership queries and component-to-component path search."""

from __future__ import annotations

from collections import deque
from typing import Optional

from pcb_review.models.pcb import PCBData


def get_components_on_net(pcb: PCBData, net_name: str) -> list[str]:
    """Sorted references of the components touching *net_name* (empty if unknown)."""
    net_num = pcb.find_net_number(net_name)
    if net_num is None:
        return []
    conn = pcb.connectivity.get(net_num)
    return sorted(conn.components) if conn else []


def trace_signal_path(pcb: PCBData, start: str, end: str) -> Optional[list[str]]:
    """Shortest component-hop path between two references.

    Components are adjacent when they share a net. The path alternates
    references and ``[NET]`` annotations, e.g. ``["J1", "[GND]", "U1"]``,
    where each annotation is the lowest-numbered net the two hops share.
    Nets and neighbours are visited in sorted order so the result is
    deterministic.

    Returns:
        The annotated path, ``[start]`` when start == end, or None when either
        component has no nets or no path exists.
    """
    start_nets = pcb.component_nets.get(start)
    end_nets = pcb.component_nets.get(end)
    if not start_nets or not end_nets:
        return None

    parent: dict[str, Optional[str]] = {start: None}
    queue = deque([start])

    while queue:
        current = queue.popleft()
        if current == end:
            return _annotate_path(pcb, _reconstruct_path(parent, end))

        for net_num in sorted(pcb.component_nets.get(current, ())):
            conn = pcb.connectivity.get(net_num)
            if conn is None:
                continue
            for neighbor in sorted(conn.components):
                if neighbor not in parent:
                    parent[neighbor] = current
                    queue.append(neighbor)

    return None


def _reconstruct_path(parent: dict[str, Optional[str]], end: str) -> list[str]:
    path = []
    node: Optional[str] = end
    while node is not None:
        path.append(node)
        node = parent[node]
    path.reverse()
    return path


def _annotate_path(pcb: PCBData, path: list[str]) -> list[str]:
    detailed: list[str] = []
    for i, ref in enumerate(path):
        detailed.append(ref)
        if i < len(path) - 1:
            shared = pcb.component_nets[ref] & pcb.component_nets[path[i + 1]]
            if shared:
                detailed.append(f"[{pcb.net_label(min(shared))}]")
    return detailed
