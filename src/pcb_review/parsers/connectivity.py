"""Net connectivity index for extracted PCB data."""

from __future__ import annotations

from pcb_review.logging_config import get_logger
from pcb_review.models.pcb import NetConnectivity, PadConnection, PCBData

logger = get_logger("parsers.connectivity")


def build_connectivity(pcb: PCBData) -> PCBData:
    """Populate ``pcb.connectivity`` and ``pcb.component_nets`` from scratch.

    One NetConnectivity is seeded per net in the net table (net 0 included).
    Traces and vias fold into their net. A footprint joins a net through any
    pad whose net number is positive and present in the net table, and the
    same net is then recorded in the footprint's reverse index entry, so the
    two indexes always agree.

    Returns:
        The same PCBData, for chaining.
    """
    connectivity: dict[int, NetConnectivity] = {number: NetConnectivity() for number in pcb.nets}
    component_nets: dict[str, set[int]] = {}

    for trace in pcb.traces:
        conn = connectivity.get(trace.net)
        if conn is not None:
            conn.traces.append(trace)

    for via in pcb.vias:
        conn = connectivity.get(via.net)
        if conn is not None:
            conn.vias.append(via)

    for fp in pcb.footprints:
        nets = component_nets.setdefault(fp.reference, set())
        for pad in fp.pads:
            if pad.net is None or pad.net <= 0:
                continue
            conn = connectivity.get(pad.net)
            if conn is None:
                logger.debug(
                    "Pad %s.%s references undeclared net %d", fp.reference, pad.number, pad.net,
                )
                continue
            conn.components.add(fp.reference)
            conn.pads.append(PadConnection(component=fp.reference, pad=pad.number, net_name=pad.net_name))
            nets.add(pad.net)

    pcb.connectivity = connectivity
    pcb.component_nets = component_nets
    return pcb
