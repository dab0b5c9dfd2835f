import asyncio
import pytest
from todo.services.alarm_service import AlarmService
from todo.services.alarm_controller import AlarmController
from todo.domain.alarm import AlarmConfig, DEFAULT_ALARM_CONFIG, validate_alarm_config
from todo.domain.enums import AlarmType, AlarmErrorCode
from fakes import RecordingFeedbackDevice, SlowFeedbackDevice

QUICK_FLASH = AlarmConfig(vibration_duration=100, flash_duration=1000, type=AlarmType.BOTH)


def test_default_config():
    assert DEFAULT_ALARM_CONFIG == AlarmConfig(200, 3000, AlarmType.BOTH)
    assert validate_alarm_config(DEFAULT_ALARM_CONFIG).is_valid


@pytest.mark.parametrize("config, errors", [
    (AlarmConfig(vibration_duration=49), 1),
    (AlarmConfig(vibration_duration=5001), 1),
    (AlarmConfig(flash_duration=999), 1),
    (AlarmConfig(vibration_duration=10, flash_duration=20000), 2),
    (AlarmConfig(vibration_duration=50, flash_duration=10000), 0),
])
def test_config_ranges(config, errors):
    assert len(validate_alarm_config(config).errors) == errors


@pytest.mark.asyncio
async def test_vibration_only():
    device = RecordingFeedbackDevice()
    service = AlarmService(device)

    result = await service.trigger_alarm(AlarmConfig(type=AlarmType.VIBRATION))

    assert result.success
    assert device.calls == [("vibrate", 200)]
    assert not service.is_active


@pytest.mark.asyncio
async def test_flash_turns_off_by_itself():
    device = RecordingFeedbackDevice()
    service = AlarmService(device)

    result = await service.trigger_alarm(AlarmConfig(flash_duration=1000, type=AlarmType.FLASH))
    assert result.success
    assert service.is_active and device.flash_lit

    await service.wait_idle()

    assert not service.is_active
    assert not device.flash_lit
    assert device.calls == [("flash_on",), ("flash_off",)]


@pytest.mark.asyncio
async def test_second_trigger_while_active_is_rejected():
    device = RecordingFeedbackDevice()
    service = AlarmService(device)
    await service.trigger_alarm(QUICK_FLASH)

    second = await service.trigger_alarm(QUICK_FLASH)

    assert not second.success
    assert second.error == AlarmErrorCode.ALARM_ALREADY_ACTIVE
    assert device.calls.count(("flash_on",)) == 1
    await service.stop_alarm()


@pytest.mark.asyncio
async def test_stop_cancels_timer():
    device = RecordingFeedbackDevice()
    service = AlarmService(device)
    await service.trigger_alarm(AlarmConfig(flash_duration=10000, type=AlarmType.FLASH))

    result = await service.stop_alarm()
    await asyncio.sleep(0)

    assert result.success
    assert not service.is_active
    assert device.calls == [("flash_on",), ("flash_off",)]


@pytest.mark.asyncio
async def test_partial_failure_keeps_successful_action():
    device = RecordingFeedbackDevice(fail_vibrate=True)
    service = AlarmService(device)

    result = await service.trigger_alarm(QUICK_FLASH)

    assert not result.success
    assert result.error == AlarmErrorCode.PARTIAL_FAILURE
    # lampa zostaje włączona, nie ma wycofania
    assert service.is_active and device.flash_lit
    await service.stop_alarm()


@pytest.mark.asyncio
async def test_flash_failure_leaves_service_idle():
    device = RecordingFeedbackDevice(fail_flash=True)
    service = AlarmService(device)

    result = await service.trigger_alarm(AlarmConfig(type=AlarmType.FLASH))

    assert result.error == AlarmErrorCode.PARTIAL_FAILURE
    assert not service.is_active


@pytest.mark.asyncio
async def test_controller_rejects_invalid_overrides_without_touching_device():
    device = RecordingFeedbackDevice()
    controller = AlarmController(AlarmService(device))

    result = await controller.handle_alarm_request(vibration_duration=10)

    assert not result.success
    assert result.error == AlarmErrorCode.INVALID_CONFIG
    assert device.calls == []


@pytest.mark.asyncio
async def test_controller_merges_overrides_with_defaults():
    device = RecordingFeedbackDevice()
    controller = AlarmController(AlarmService(device))

    result = await controller.handle_alarm_request(type=AlarmType.VIBRATION, vibration_duration=300, flash_duration=None)

    assert result.success
    assert device.calls == [("vibrate", 300)]
    assert controller.default_config() == DEFAULT_ALARM_CONFIG
    assert not controller.is_alarm_active()


@pytest.mark.asyncio
async def test_concurrent_triggers_start_only_one_flash():
    device = SlowFeedbackDevice()
    service = AlarmService(device)
    flash = AlarmConfig(flash_duration=1000, type=AlarmType.FLASH)

    first, second = await asyncio.gather(service.trigger_alarm(flash), service.trigger_alarm(flash))

    assert first.success
    assert second.error == AlarmErrorCode.ALARM_ALREADY_ACTIVE
    assert device.calls == [("flash_on",)]

    await service.stop_alarm()
    await asyncio.sleep(1.1)

    assert device.calls == [("flash_on",), ("flash_off",)]
    assert not service.is_active


@pytest.mark.asyncio
async def test_failed_slow_flash_releases_slot():
    device = SlowFeedbackDevice(fail_flash=True)
    service = AlarmService(device)
    flash = AlarmConfig(type=AlarmType.FLASH)

    failed = await service.trigger_alarm(flash)
    device.fail_flash = False
    retried = await service.trigger_alarm(flash)

    assert failed.error == AlarmErrorCode.PARTIAL_FAILURE
    assert retried.success
    await service.stop_alarm()
