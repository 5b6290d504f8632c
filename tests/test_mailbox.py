import queue

import pytest

from src.common.mailbox import Mailbox, TransportError
from src.common.protocol import Discovery, ProtocolError, Terminate
from src.common.rules import Category


def test_try_receive_empty_returns_none(make_mailbox):
    assert make_mailbox().try_receive() is None


def test_messages_come_out_in_send_order(make_mailbox):
    box = make_mailbox()
    box.send(Discovery(1, Category.FLUSH))
    box.send(Discovery(1, Category.STRAIGHT))
    box.send(Terminate())
    assert box.try_receive() == Discovery(1, Category.FLUSH)
    assert box.try_receive() == Discovery(1, Category.STRAIGHT)
    assert box.try_receive() == Terminate()
    assert box.try_receive() is None


def test_consumed_message_is_not_seen_twice(make_mailbox):
    box = make_mailbox()
    box.send(Terminate())
    assert box.try_receive() == Terminate()
    assert box.try_receive() is None


def test_garbage_packet_is_fatal():
    q = queue.Queue()
    q.put(b"not a packet")
    with pytest.raises(ProtocolError):
        Mailbox("garbage", q).try_receive()


def test_full_queue_is_a_transport_error():
    box = Mailbox("tiny", queue.Queue(maxsize=1))
    box.send(Terminate())
    with pytest.raises(TransportError):
        box.send(Terminate())


def test_drain(make_mailbox):
    box = make_mailbox()
    for _ in range(3):
        box.send(Terminate())
    assert box.drain() == 3
    assert box.try_receive() is None
