"""Tests for net membership queries and signal path search."""

from __future__ import annotations

from pcb_review.analyzers.signal_path import get_components_on_net, trace_signal_path
from pcb_review.models.pcb import PCBData


class TestComponentsOnNet:
    def test_sorted_members(self, sample_pcb: PCBData):
        assert get_components_on_net(sample_pcb, "GND") == ["C1", "D1", "J1", "U1", "U2"]
        assert get_components_on_net(sample_pcb, "USB_D+") == ["J1", "U2"]

    def test_unknown_net(self, sample_pcb: PCBData):
        assert get_components_on_net(sample_pcb, "NOPE") == []


class TestTraceSignalPath:
    def test_direct_neighbours(self, sample_pcb: PCBData):
        assert trace_signal_path(sample_pcb, "J1", "D1") == ["J1", "[GND]", "D1"]

    def test_two_hops(self, sample_pcb: PCBData):
        assert trace_signal_path(sample_pcb, "J1", "R1") == ["J1", "[GND]", "C1", "[+3V3]", "R1"]

    def test_chain(self, chain_pcb: PCBData):
        assert trace_signal_path(chain_pcb, "R1", "R3") == ["R1", "[NET1]", "R2", "[NET2]", "R3"]
        assert trace_signal_path(chain_pcb, "R3", "R1") == ["R3", "[NET2]", "R2", "[NET1]", "R1"]

    def test_same_component(self, chain_pcb: PCBData):
        assert trace_signal_path(chain_pcb, "R1", "R1") == ["R1"]

    def test_unconnected_component(self, sample_pcb: PCBData, chain_pcb: PCBData):
        assert trace_signal_path(sample_pcb, "J1", "H1") is None
        assert trace_signal_path(chain_pcb, "R1", "R4") is None
        assert trace_signal_path(chain_pcb, "R4", "R4") is None

    def test_unknown_component(self, sample_pcb: PCBData):
        assert trace_signal_path(sample_pcb, "J1", "X99") is None

    def test_path_is_shortest(self, sample_pcb: PCBData):
        path = trace_signal_path(sample_pcb, "R1", "U2")
        assert path == ["R1", "[+3V3]", "U2"]

    def test_deterministic(self, sample_pcb: PCBData):
        first = trace_signal_path(sample_pcb, "D1", "J1")
        for _ in range(5):
            assert trace_signal_path(sample_pcb, "D1", "J1") == first
