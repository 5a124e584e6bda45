"""Differential pair detection by net naming convention."""

from __future__ import annotations

from typing import Optional

from pcb_review.models.analysis import DifferentialPair
from pcb_review.models.pcb import PCBData

# (own suffix, partner suffix, own side is positive), tried in order
DIFF_PAIR_SUFFIXES = [
    ("+", "-", True),
    ("-", "+", False),
    ("P", "N", True),
    ("N", "P", False),
]


def match_diff_pair_suffix(net_name: str) -> Optional[tuple[str, str, bool]]:
    """Split a net name into (base name, partner net name, is_positive).

    Returns None when the name carries no pair suffix or the base would be
    empty. The first matching convention wins.
    """
    for suffix, partner, is_positive in DIFF_PAIR_SUFFIXES:
        if net_name.endswith(suffix):
            base = net_name[: -len(suffix)]
            if not base:
                return None
            return base, base + partner, is_positive
    return None


def detect_differential_pairs(pcb: PCBData) -> list[DifferentialPair]:
    """Pair up nets such as ``USB_D+``/``USB_D-`` or ``LVDS_P``/``LVDS_N``.

    Each pair is reported once, with the routed length of both sides and the
    union of components on them. Sorted by base name.
    """
    pairs: list[DifferentialPair] = []
    processed: set[str] = set()

    for net_num, net_name in pcb.nets.items():
        if net_name in processed:
            continue

        match = match_diff_pair_suffix(net_name)
        if match is None:
            continue
        base, other_name, is_positive = match

        other_num = pcb.find_net_number(other_name)
        if other_num is None:
            continue

        processed.add(net_name)
        processed.add(other_name)

        conn = pcb.connectivity.get(net_num)
        other_conn = pcb.connectivity.get(other_num)
        length = conn.total_trace_length if conn else 0.0
        other_length = other_conn.total_trace_length if other_conn else 0.0

        components: set[str] = set()
        for c in (conn, other_conn):
            if c is not None:
                components |= c.components

        if is_positive:
            pos_net, neg_net, pos_len, neg_len = net_name, other_name, length, other_length
        else:
            pos_net, neg_net, pos_len, neg_len = other_name, net_name, other_length, length

        pairs.append(DifferentialPair(
            base_name=base,
            positive_net=pos_net,
            negative_net=neg_net,
            pos_length=round(pos_len, 3),
            neg_length=round(neg_len, 3),
            length_mismatch=round(abs(pos_len - neg_len), 3),
            components=sorted(components),
        ))

    return sorted(pairs, key=lambda p: p.base_name)
