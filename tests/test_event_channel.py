"""
Tests for the bounded event channel.
"""
import queue
import threading

import pytest

from intentbridge.events.channel import ChannelClosed, EventChannel


class TestEventChannel:

    def test_fifo_order(self):
        channel = EventChannel(capacity=10)
        for i in range(5):
            assert channel.send(i) is True
        assert [channel.recv(timeout=1) for _ in range(5)] == [0, 1, 2, 3, 4]

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            EventChannel(capacity=0)

    def test_full_channel_times_out(self):
        channel = EventChannel(capacity=2, send_timeout=0.01)
        assert channel.send("a")
        assert channel.send("b")
        assert channel.send("c") is False
        assert len(channel) == 2

    def test_send_after_close(self):
        channel = EventChannel()
        channel.close()
        assert channel.closed
        assert channel.send("late") is False

    def test_drains_before_reporting_closed(self):
        channel = EventChannel()
        channel.send("a")
        channel.close()
        assert channel.recv(timeout=1) == "a"
        with pytest.raises(ChannelClosed):
            channel.recv(timeout=1)

    def test_recv_timeout_while_open(self):
        channel = EventChannel()
        with pytest.raises(queue.Empty):
            channel.recv(timeout=0.05)

    def test_iteration_ends_on_close(self):
        channel = EventChannel()
        for item in ("x", "y"):
            channel.send(item)
        channel.close()
        assert list(channel) == ["x", "y"]

    def test_backpressure_released_by_consumer(self):
        channel = EventChannel(capacity=1, send_timeout=5)
        channel.send(1)
        results = []
        producer = threading.Thread(target=lambda: results.append(channel.send(2)))
        producer.start()
        assert channel.recv(timeout=1) == 1
        producer.join(timeout=5)
        assert results == [True]
        assert channel.recv(timeout=1) == 2

    def test_close_releases_blocked_producer(self):
        channel = EventChannel(capacity=1, send_timeout=None)
        channel.send(1)
        results = []
        producer = threading.Thread(target=lambda: results.append(channel.send(2)))
        producer.start()
        channel.close()
        producer.join(timeout=2)
        assert not producer.is_alive()
        assert results == [False]
        assert len(channel) == 1
