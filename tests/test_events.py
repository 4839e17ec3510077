from datetime import timedelta

from sensor_samples.events import Event, EventArray
from sensor_samples.frame import EPOCH


def test_default_event_is_at_origin_and_epoch():
    event = Event()
    assert (event.x, event.y, event.polarity) == (0, 0, 0)
    assert event.ts == EPOCH


def test_event_keeps_given_values():
    stamp = EPOCH + timedelta(seconds=3)
    event = Event(4, 7, stamp, 1)
    assert event.x == 4
    assert event.y == 7
    assert event.ts == stamp
    assert event.polarity == 1


def test_event_arrays_do_not_share_event_lists():
    first = EventArray()
    second = EventArray()
    first.events.append(Event(1, 2))
    assert len(first) == 1
    assert len(second) == 0


def test_event_array_iterates_in_order():
    events = [Event(i, i + 1) for i in range(3)]
    array = EventArray(height=2, width=5, events=events)
    assert list(array) == events
    assert array.height == 2 and array.width == 5
    assert array.time == EPOCH