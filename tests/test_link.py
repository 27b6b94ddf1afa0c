import pytest

from link import (
    DEFAULT_LINK_WIDTH_PX, InvalidState, LinkModel, LinkState,
    NoActivePacket,
)
from packet import Packet, PacketState

# 2.8E8 m/s * 510 px / 1E5 m
PX_PER_SECOND = 1.428E6


def configured(model, length=1E5, rate=1E6, size=4E3):
    model.configure(length, rate)
    model.send_packet(size, 0.0)
    return model


# ============================================================================
# Configuration and lifecycle
# ============================================================================

def test_new_model_is_idle():
    model = LinkModel()
    assert model.link_width_px == DEFAULT_LINK_WIDTH_PX
    assert model.state == LinkState.IDLE
    assert model.render_state() is None
    assert model.current_time == 0.0


def test_send_without_configure_fails_fast(model):
    with pytest.raises(InvalidState):
        model.send_packet(4E3, 0.0)
    assert model.packet is None


@pytest.mark.parametrize("length, rate", [(0, 1E6), (1E5, 0), (-1, 1E6)])
def test_configure_rejects_non_positive(model, length, rate):
    with pytest.raises(ValueError):
        model.configure(length, rate)


def test_send_rejects_non_positive_size(model):
    model.configure(1E5, 1E6)
    with pytest.raises(ValueError):
        model.send_packet(0, 0.0)


def test_send_replaces_existing_packet(model):
    configured(model)
    second = model.send_packet(8E3, 0.0)
    assert model.packet is second
    assert model.total_time() == pytest.approx(8E-3 + 1E5 / 2.8E8)


def test_configure_does_not_touch_packet(model):
    configured(model)
    packet = model.packet
    model.configure(1E6, 1E8)
    assert model.packet is packet
    assert model.state == LinkState.IN_FLIGHT


# ============================================================================
# Total time
# ============================================================================

@pytest.mark.parametrize("length, rate, size", [
    (1E4, 5.12E5, 8E2),
    (1E5, 1E6, 4E3),
    (5E5, 1E7, 8E3),
    (1E6, 1E8, 8E2),
])
def test_total_time_formula(model, length, rate, size):
    configured(model, length, rate, size)
    assert model.total_time() == pytest.approx(size / rate + length / 2.8E8)


def test_total_time_without_packet(model):
    model.configure(1E5, 1E6)
    with pytest.raises(NoActivePacket):
        model.total_time()


def test_no_active_packet_is_an_invalid_state(model):
    with pytest.raises(InvalidState):
        model.delay_breakdown()


def test_example_scenario(model):
    configured(model)
    breakdown = model.delay_breakdown()
    assert breakdown.transmission_delay == pytest.approx(4E-3)
    assert breakdown.propagation_delay == pytest.approx(3.5714285714e-4)
    assert model.format_elapsed_time(model.total_time()) == "4.357 ms"


# ============================================================================
# Receive condition
# ============================================================================

def test_packet_kept_at_exact_total_time(model):
    configured(model)
    total = model.total_time()
    model.update_time(total)
    assert model.state == LinkState.IN_FLIGHT


def test_packet_cleared_after_total_time(model):
    configured(model)
    packet = model.packet
    total = model.total_time()
    model.update_time(total + 1E-9)
    assert model.state == LinkState.IDLE
    assert model.render_state() is None
    assert packet.state == PacketState.RECEIVED
    with pytest.raises(NoActivePacket):
        model.total_time()


def test_receive_condition_respects_emission_time(model):
    model.configure(1E5, 1E6)
    model.send_packet(4E3, 1.0)
    model.update_time(1.004)
    assert model.state == LinkState.IN_FLIGHT
    model.update_time(1.005)
    assert model.state == LinkState.IDLE


def test_clear_packet_is_idempotent(model):
    configured(model)
    model.clear_packet()
    model.clear_packet()
    assert model.state == LinkState.IDLE
    assert model.render_state() is None


def test_reset(model):
    configured(model)
    model.update_time(2E-3)
    model.reset()
    assert model.state == LinkState.IDLE
    assert model.current_time == 0.0
    assert model.format_elapsed_time() == "0.000 ms"


# ============================================================================
# Render state
# ============================================================================

def test_render_state_at_emission(model):
    configured(model)
    state = model.render_state()
    assert state.occupied_start == 0
    assert state.occupied_end == 0
    assert state.elapsed_label == "0.000 ms"


def test_leading_edge_on_the_link(model):
    configured(model)
    model.update_time(1E-4)
    state = model.render_state()
    assert state.occupied_start == 0
    assert state.occupied_end == pytest.approx(1E-4 * PX_PER_SECOND)
    assert state.end_fraction == pytest.approx(1E-4 * PX_PER_SECOND / 510)


def test_packet_fills_the_link_while_transmitting(model):
    configured(model)
    model.update_time(2E-3)
    state = model.render_state()
    assert state.occupied_start == 0
    assert state.occupied_end == 510


def test_trailing_edge_leaves_the_sender(model):
    configured(model)
    model.update_time(4.2E-3)
    state = model.render_state()
    assert state.occupied_start == pytest.approx(2E-4 * PX_PER_SECOND)
    assert state.occupied_end == 510


def test_before_emission_nothing_is_drawn(model):
    model.configure(1E5, 1E6)
    model.send_packet(4E3, 1E-3)
    state = model.render_state()
    assert state.occupied_start == 0
    assert state.occupied_end == 0


def test_render_bounds_hold_over_a_whole_run(model):
    configured(model, 1E4, 1E8, 8E2)
    total = model.total_time()
    t = 0.0
    while model.state == LinkState.IN_FLIGHT:
        state = model.render_state()
        assert 0 <= state.occupied_start <= state.occupied_end <= 510
        t += total / 50
        model.update_time(t)
    assert model.render_state() is None


def test_to_dict(model):
    configured(model)
    data = model.to_dict()
    assert data["state"] == "in_flight"
    assert data["configuration"] == {"length_m": 1E5, "rate_bps": 1E6}
    assert data["packet"]["size_bytes"] == 500


def test_packet_relative_time():
    packet = Packet(size_bits=800, emission_time=0.5)
    assert packet.relative_time(0.75) == pytest.approx(0.25)
    assert packet.size_bytes == 100
