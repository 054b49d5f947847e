"""
Unit tests for LocationCoordinator: the request -> push -> report -> poll cycle.
"""
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from locator.domain.exceptions import (
    DeviceNotFoundError,
    InvalidArgumentError,
    PushDeliveryFailedError,
)
from locator.domain.models.tracking_session import Coordinates, TrackingStatus
from locator.domain.services.push_sender import REQUEST_GPS_COMMAND


@pytest_asyncio.fixture
async def registered(coordinator):
    await coordinator.register_device("pixel-7", "fcm-token-1")
    return coordinator


class TestRequestTracking:
    """Tests for LocationCoordinator.request_tracking"""

    @pytest.mark.asyncio
    async def test_sends_wake_signal_then_marks_requested(self, registered, push_sender):
        session = await registered.request_tracking(device_id="pixel-7")

        assert push_sender.sent == [("fcm-token-1", REQUEST_GPS_COMMAND, "high")]
        assert session.status == TrackingStatus.REQUESTED

        status = await registered.get_status("pixel-7")
        assert status.status == TrackingStatus.REQUESTED
        assert status.coordinates is None

    @pytest.mark.asyncio
    async def test_resolves_device_by_token(self, registered, push_sender):
        session = await registered.request_tracking(device_token="fcm-token-1")
        assert session.session_key == "pixel-7"
        assert len(push_sender.sent) == 1

    @pytest.mark.asyncio
    async def test_missing_identifiers_rejected(self, registered, push_sender):
        with pytest.raises(InvalidArgumentError):
            await registered.request_tracking()
        assert push_sender.sent == []

    @pytest.mark.asyncio
    async def test_unknown_device_leaves_store_untouched(self, registered, push_sender):
        await registered.report_location("pixel-7", Coordinates(1.0, 2.0))

        with pytest.raises(DeviceNotFoundError):
            await registered.request_tracking(device_id="unknown")
        with pytest.raises(DeviceNotFoundError):
            await registered.request_tracking(device_token="unknown-token")

        assert push_sender.sent == []
        latest = await registered.get_status()
        assert latest.status == TrackingStatus.OK
        assert latest.coordinates == Coordinates(1.0, 2.0)

    @pytest.mark.asyncio
    async def test_push_failure_keeps_prior_state(self, registered, push_sender):
        await registered.report_location("pixel-7", Coordinates(1.0, 2.0))
        push_sender.fail = True

        with pytest.raises(PushDeliveryFailedError):
            await registered.request_tracking(device_id="pixel-7")

        status = await registered.get_status("pixel-7")
        assert status.status == TrackingStatus.OK
        assert status.coordinates == Coordinates(1.0, 2.0)

    @pytest.mark.asyncio
    async def test_push_failure_on_fresh_device_stays_waiting(self, registered, push_sender):
        push_sender.fail = True
        with pytest.raises(PushDeliveryFailedError):
            await registered.request_tracking(device_id="pixel-7")
        status = await registered.get_status("pixel-7")
        assert status.status == TrackingStatus.WAITING

    @pytest.mark.asyncio
    async def test_mark_happens_only_after_send(self, registered, push_sender):
        observed = []
        store = registered.rendezvous_store

        async def send(token, data, priority="high"):
            observed.append((await store.read("pixel-7")).status)
            return "msg-1"

        registered.push_sender = AsyncMock()
        registered.push_sender.send.side_effect = send
        await registered.request_tracking(device_id="pixel-7")

        assert observed == [TrackingStatus.WAITING]
        assert (await store.read("pixel-7")).status == TrackingStatus.REQUESTED


class TestReportLocation:
    """Tests for report_location / report_failure"""

    @pytest.mark.asyncio
    async def test_report_after_request_completes_session(self, registered):
        await registered.request_tracking(device_id="pixel-7")
        await registered.report_location("pixel-7", Coordinates(40.4168, -3.7038, 12.5, "fused"))

        status = await registered.get_status("pixel-7")
        assert status.status == TrackingStatus.OK
        assert status.coordinates == Coordinates(40.4168, -3.7038, 12.5, "fused")

    @pytest.mark.asyncio
    async def test_new_request_hides_old_answer(self, registered):
        await registered.request_tracking(device_id="pixel-7")
        await registered.report_location("pixel-7", Coordinates(1.0, 2.0))
        await registered.request_tracking(device_id="pixel-7")

        status = await registered.get_status("pixel-7")
        assert status.status == TrackingStatus.REQUESTED
        assert status.coordinates is None

    @pytest.mark.asyncio
    async def test_unsolicited_report_accepted(self, registered):
        await registered.report_location("pixel-7", Coordinates(1.0, 2.0))
        status = await registered.get_status("pixel-7")
        assert status.status == TrackingStatus.OK

    @pytest.mark.asyncio
    async def test_missing_coordinates_rejected_and_state_unchanged(self, registered):
        await registered.request_tracking(device_id="pixel-7")
        with pytest.raises(InvalidArgumentError):
            await registered.report_location("pixel-7", None)

        status = await registered.get_status("pixel-7")
        assert status.status == TrackingStatus.REQUESTED

    @pytest.mark.asyncio
    async def test_missing_device_id_rejected(self, registered):
        with pytest.raises(InvalidArgumentError):
            await registered.report_location("", Coordinates(1.0, 2.0))

    @pytest.mark.asyncio
    async def test_report_failure(self, registered):
        await registered.request_tracking(device_id="pixel-7")
        await registered.report_failure("pixel-7", "GPS disabled")

        status = await registered.get_status("pixel-7")
        assert status.status == TrackingStatus.ERROR
        assert status.error == "GPS disabled"

    @pytest.mark.asyncio
    async def test_report_failure_without_message(self, registered):
        await registered.report_failure("pixel-7", "   ")
        status = await registered.get_status("pixel-7")
        assert status.error == "Unknown device error"

    @pytest.mark.asyncio
    async def test_sessions_do_not_cross_talk(self, registered):
        await registered.register_device("galaxy-s23", "fcm-token-2")
        await registered.request_tracking(device_id="pixel-7")
        await registered.request_tracking(device_id="galaxy-s23")
        await registered.report_location("galaxy-s23", Coordinates(5.0, 6.0))

        pixel = await registered.get_status("pixel-7")
        galaxy = await registered.get_status("galaxy-s23")
        assert pixel.status == TrackingStatus.REQUESTED
        assert pixel.coordinates is None
        assert galaxy.coordinates == Coordinates(5.0, 6.0)


class TestStaleness:
    """Tests for the staleness flag on get_status"""

    @pytest.mark.asyncio
    async def test_fresh_request_not_stale(self, registered, clock):
        await registered.request_tracking(device_id="pixel-7")
        clock.advance(60)
        status = await registered.get_status("pixel-7")
        assert status.stale is False

    @pytest.mark.asyncio
    async def test_old_request_is_stale(self, registered, clock):
        await registered.request_tracking(device_id="pixel-7")
        clock.advance(121)
        status = await registered.get_status("pixel-7")
        assert status.status == TrackingStatus.REQUESTED
        assert status.stale is True

    @pytest.mark.asyncio
    async def test_answered_session_never_stale(self, registered, clock):
        await registered.request_tracking(device_id="pixel-7")
        await registered.report_location("pixel-7", Coordinates(1.0, 2.0))
        clock.advance(3600)
        status = await registered.get_status("pixel-7")
        assert status.stale is False

    @pytest.mark.asyncio
    async def test_staleness_not_persisted(self, registered, clock, session_repository):
        await registered.request_tracking(device_id="pixel-7")
        clock.advance(500)
        await registered.get_status("pixel-7")
        stored = await session_repository.find_by_key("pixel-7")
        assert stored.stale is False
