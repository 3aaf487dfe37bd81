from __future__ import annotations

import io
import json
import logging

import pytest

from deflation import logging as dlog
from deflation.errors import InsufficientBalance
from deflation.state.events import InMemoryEventSink, NullEventSink, deliver
from deflation.types.events import TRANSFER, LedgerEvent

from .conftest import OWNER, USER, USER2, at


def test_event_to_dict_renders_addresses():
    e = LedgerEvent(TRANSFER, {"from": OWNER, "to": USER, "value": 5}, 7)
    assert e.to_dict() == {
        "name": "Transfer",
        "args": {"from": OWNER.hex(), "to": USER.hex(), "value": 5},
        "timestamp": 7,
    }
    with pytest.raises(TypeError):
        e.args["value"] = 6  # type: ignore[index]


def test_sinks():
    sink = InMemoryEventSink()
    n = deliver(sink, [LedgerEvent("A"), LedgerEvent("B"), LedgerEvent("A")])
    assert n == 3 and len(sink) == 3
    assert [e.name for e in sink.named("A")] == ["A", "A"]
    assert sink.last().name == "A"
    sink.clear()
    assert sink.all() == []
    assert deliver(NullEventSink(), [LedgerEvent("A")]) == 1


def test_events_carry_call_timestamp(token, sink):
    token.transfer(at(OWNER, 123), USER, 100)
    assert sink.last("Transfer").timestamp == 123


def test_rejection_logged_with_code(token, caplog):
    caplog.set_level(logging.DEBUG, logger="deflation.token")
    with pytest.raises(InsufficientBalance):
        token.transfer(at(USER), USER2, 1)
    rec = [r for r in caplog.records if r.getMessage() == "call rejected"]
    assert rec and rec[-1].code == "INSUFFICIENT_BALANCE"
    assert rec[-1].op == "transfer"
    assert rec[-1].sender == USER.hex()
    assert rec[-1].error["data"] == {"address": USER.hex(), "balance": 0, "amount": 1}


def test_json_formatter_includes_context_and_extras():
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(dlog.JSONFormatter())
    logger = logging.getLogger("deflation.test.json")
    logger.addHandler(handler)
    logger.propagate = False
    logger.setLevel(logging.INFO)
    try:
        with dlog.trace_scope("t-1"):
            dlog.bind(component="airdrop")
            logger.info("claim accepted", extra={"claimant": USER, "amount": 720})
        assert dlog.context() == {}
    finally:
        logger.removeHandler(handler)

    payload = json.loads(stream.getvalue())
    assert payload["msg"] == "claim accepted"
    assert payload["trace_id"] == "t-1"
    assert payload["component"] == "airdrop"
    assert payload["claimant"] == USER.hex()
    assert payload["amount"] == 720
