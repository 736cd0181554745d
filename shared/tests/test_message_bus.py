from dataclasses import dataclass

from shared.application.message_bus import MessageBus
from shared.domain.base import DomainEvent


@dataclass
class SomethingHappened(DomainEvent):
    value: int


def test_every_handler_receives_the_event():
    bus = MessageBus()
    seen = []
    bus.register_event_handler(SomethingHappened, lambda event: seen.append(("a", event.value)))
    bus.register_event_handler(SomethingHappened, lambda event: seen.append(("b", event.value)))

    bus.publish_events([SomethingHappened(value=7)])

    assert seen == [("a", 7), ("b", 7)]


def test_registering_the_same_handler_twice_is_ignored():
    bus = MessageBus()
    seen = []

    def handler(event):
        seen.append(event.value)

    bus.register_event_handler(SomethingHappened, handler)
    bus.register_event_handler(SomethingHappened, handler)
    bus.publish_events([SomethingHappened(value=1)])

    assert seen == [1]


def test_failing_handler_does_not_stop_the_others():
    bus = MessageBus()
    seen = []

    def broken(event):
        raise RuntimeError("boom")

    bus.register_event_handler(SomethingHappened, broken)
    bus.register_event_handler(SomethingHappened, lambda event: seen.append(event.value))

    bus.publish_events([SomethingHappened(value=3)])

    assert seen == [3]


def test_event_serializes_its_identity():
    data = SomethingHappened(value=1).to_dict()

    assert data["event_type"] == "SomethingHappened"
    assert data["event_id"]
    assert data["occurred_at"]
