"""
保存合并队列测试
"""

from application.save_queue import SaveCoalescingQueue, SaveRequest


def test_in_flight_tracking():
    queue = SaveCoalescingQueue()

    queue.mark_in_flight("a.bin")

    assert queue.is_in_flight("a.bin")
    assert not queue.is_in_flight("b.bin")
    assert queue.in_flight_filenames() == ["a.bin"]

    queue.clear_in_flight("a.bin")
    queue.clear_in_flight("a.bin")
    assert not queue.is_in_flight("a.bin")


def test_last_pending_request_wins():
    queue = SaveCoalescingQueue()
    first = SaveRequest("a.bin", verify_map=True)
    second = SaveRequest("a.bin", verify_map=False)

    assert queue.queue_delayed_save(first) is None
    assert queue.queue_delayed_save(second) is first

    assert queue.take_pending("a.bin") is second
    assert queue.take_pending("a.bin") is None
    assert not queue.has_pending("a.bin")


def test_pending_slots_are_per_filename():
    queue = SaveCoalescingQueue()
    queue.queue_delayed_save(SaveRequest("a.bin"))
    queue.queue_delayed_save(SaveRequest("b.bin"))

    assert queue.has_pending("a.bin")
    assert queue.has_pending("b.bin")

    queue.take_pending("a.bin")
    assert queue.has_pending("b.bin")


def test_request_defaults():
    request = SaveRequest("a.bin")

    assert request.after_save_callback is None
    assert request.before_save_callback is None
    assert request.add_ext_if_missing is True
    assert request.verify_map is True
