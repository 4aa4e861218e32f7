"""Tests for the refresh publish/subscribe channel."""

from favorites_tree.events import RefreshChannel


def test_publish_reaches_all_subscribers_even_if_one_fails() -> None:
    channel = RefreshChannel()
    calls: list[str] = []

    def broken() -> None:
        raise RuntimeError("view gone")

    channel.subscribe(lambda: calls.append("tree"))
    channel.subscribe(broken)
    channel.subscribe(lambda: calls.append("decorations"))

    channel.publish()

    assert calls == ["tree", "decorations"]


def test_unsubscribe_stops_notifications() -> None:
    channel = RefreshChannel()
    calls: list[int] = []
    unsubscribe = channel.subscribe(lambda: calls.append(1))

    channel.publish()
    unsubscribe()
    unsubscribe()
    channel.publish()

    assert calls == [1]
