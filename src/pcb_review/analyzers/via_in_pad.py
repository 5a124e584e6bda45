"""Via-in-pad detection for SMD pads."""

from __future__ import annotations

from pcb_review.analyzers.geometry import absolute_pad_position
from pcb_review.models.analysis import ViaInPadFinding
from pcb_review.models.pcb import PCBData
from pcb_review.models.types import Point

VIA_IN_PAD_CONCERN = "Via in SMD pad may wick solder - consider filled/capped vias"


def detect_via_in_pad(pcb: PCBData) -> list[ViaInPadFinding]:
    """Find vias whose centre lies inside an SMD pad on the same net.

    Pad bounds are the axis-aligned half width/height around the pad's
    absolute position, with no tolerance. Through-hole pads are ignored and a
    via on a different net is never reported.
    """
    smd_pads = []
    for fp in pcb.footprints:
        for pad in fp.pads:
            if pad.type != "smd":
                continue
            x, y = absolute_pad_position(fp, pad)
            width = pad.size.width if pad.size else 0.0
            height = pad.size.height if pad.size else 0.0
            smd_pads.append((fp.reference, pad, x, y, width / 2, height / 2))

    findings: list[ViaInPadFinding] = []
    for via in pcb.vias:
        for reference, pad, x, y, half_w, half_h in smd_pads:
            if via.net != pad.net:
                continue
            if x - half_w <= via.x <= x + half_w and y - half_h <= via.y <= y + half_h:
                findings.append(ViaInPadFinding(
                    component=reference,
                    pad=pad.number,
                    pad_type=pad.type,
                    pad_net=pad.net_name or f"net_{pad.net}",
                    via_position=Point(x=via.x, y=via.y),
                    via_drill=via.drill,
                    via_net=pcb.net_label(via.net),
                    concern=VIA_IN_PAD_CONCERN,
                ))
    return findings
