"""Thermal via and copper pour proximity search around components."""

from __future__ import annotations

from pcb_review.analyzers.classification import (
    THERMAL_POWER_NET_KEYWORDS,
    has_thermal_pad,
    is_power_net,
    is_power_regulator,
)
from pcb_review.analyzers.geometry import distance, distance_to_bbox, point_in_polygon
from pcb_review.models.analysis import (
    ComponentThermalAnalysis,
    CopperPourAnalysis,
    NearbyVia,
    NearbyZone,
    ThermalViaAnalysis,
    ZoneCoverage,
)
from pcb_review.models.pcb import Footprint, PCBData
from pcb_review.models.types import Point

DEFAULT_THERMAL_SEARCH_RADIUS = 5.0


def find_nearby_vias(pcb: PCBData, fp: Footprint, search_radius: float) -> list[NearbyVia]:
    """Vias whose centre is within *search_radius* of the footprint origin, nearest first."""
    nearby = []
    for via in pcb.vias:
        d = distance(fp.x, fp.y, via.x, via.y)
        if d <= search_radius:
            nearby.append(NearbyVia(distance=round(d, 3), drill=via.drill, net=pcb.net_label(via.net)))
    nearby.sort(key=lambda v: v.distance)
    return nearby


def analyze_thermal_vias(pcb: PCBData, fp: Footprint, search_radius: float) -> ThermalViaAnalysis:
    vias = find_nearby_vias(pcb, fp, search_radius)
    by_net: dict[str, int] = {}
    for via in vias:
        by_net[via.net] = by_net.get(via.net, 0) + 1
    return ThermalViaAnalysis(count=len(vias), search_radius=search_radius, by_net=by_net, vias=vias)


def analyze_copper_pour(pcb: PCBData, fp: Footprint, search_radius: float) -> CopperPourAnalysis:
    """Zones under the footprint origin and zones whose bounding box is nearby.

    Containment is a bounding-box check followed by point-in-polygon. Zones
    with fewer than three polygon points are ignored.
    """
    result = CopperPourAnalysis()
    total_area = 0.0

    for zone in pcb.zones:
        if zone.bounding_box is None or not zone.polygon or len(zone.polygon) < 3:
            continue
        bbox = zone.bounding_box
        area = zone.area or 0.0

        if bbox.contains(fp.x, fp.y) and point_in_polygon(fp.x, fp.y, zone.polygon):
            result.zones_containing_component.append(
                ZoneCoverage(net=zone.net_name, layer=zone.layer, area=round(area, 2))
            )
            total_area += area

        d = distance_to_bbox(fp.x, fp.y, bbox)
        if 0 < d <= search_radius:
            result.zones_within_radius.append(
                NearbyZone(net=zone.net_name, layer=zone.layer, distance=round(d, 3), area=round(area, 2))
            )

    result.total_connected_area = round(total_area, 2)
    return result


def build_thermal_analysis(
    pcb: PCBData,
    search_radius: float = DEFAULT_THERMAL_SEARCH_RADIUS,
) -> list[ComponentThermalAnalysis]:
    """Thermal review for every regulator or thermal-pad package on the board.

    Returns:
        One entry per flagged footprint, sorted by reference.
    """
    results = []
    for fp in pcb.footprints:
        net_names = [pcb.nets.get(n, "") for n in sorted(pcb.component_nets.get(fp.reference, ()))]
        power_nets = [name for name in net_names if is_power_net(name, THERMAL_POWER_NET_KEYWORDS)]

        regulator = is_power_regulator(fp.reference, fp.value, fp.footprint_type, net_names)
        thermal_pad = has_thermal_pad(fp.footprint_type)
        if not regulator and not thermal_pad:
            continue

        results.append(ComponentThermalAnalysis(
            reference=fp.reference,
            value=fp.value,
            position=Point(x=fp.x, y=fp.y),
            footprint=fp.footprint_type,
            is_power_regulator=regulator,
            has_thermal_pad=thermal_pad,
            connected_power_nets=power_nets,
            thermal_vias=analyze_thermal_vias(pcb, fp, search_radius),
            copper_pour=analyze_copper_pour(pcb, fp, search_radius),
        ))

    return sorted(results, key=lambda r: r.reference)
