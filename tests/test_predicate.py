from __future__ import annotations

import json

import pytest

from converge.core.exceptions import ConfigurationError, TransportError
from converge.predicate import StatusConvergencePredicate
from converge.refresh import NodeRefresher
from converge.types.snapshot import NodeMetadata
from converge.types.status import Decision, NodeStatus

from tests.conftest import ScriptedClient


def _node(status: NodeStatus, node_id: str | None = "i-1") -> NodeMetadata:
    return NodeMetadata(id=node_id, status=status, name="worker")


def _running_predicate(client: ScriptedClient, **kwargs) -> StatusConvergencePredicate:
    return StatusConvergencePredicate(
        NodeStatus.RUNNING,
        NodeRefresher(client),
        invalid={NodeStatus.ERROR},
        **kwargs,
    )


class TestConstruction:
    def test_target_in_invalid_raises(self):
        with pytest.raises(ConfigurationError, match="cannot also be an invalid status"):
            StatusConvergencePredicate(
                NodeStatus.ERROR,
                NodeRefresher(ScriptedClient([None])),
                invalid={NodeStatus.ERROR},
            )

    def test_missing_target_raises(self):
        with pytest.raises(ConfigurationError, match="target"):
            StatusConvergencePredicate(None, NodeRefresher(ScriptedClient([None])))

    def test_missing_refresher_raises(self):
        with pytest.raises(ConfigurationError, match="refresher"):
            StatusConvergencePredicate(NodeStatus.RUNNING, None)

    def test_invalid_is_copied(self):
        invalid = {NodeStatus.ERROR}
        predicate = StatusConvergencePredicate(
            NodeStatus.RUNNING, NodeRefresher(ScriptedClient([None])), invalid
        )
        invalid.add(NodeStatus.TERMINATED)
        assert predicate.invalid == frozenset({NodeStatus.ERROR})

    def test_seed_is_last_seen(self):
        seed = _node(NodeStatus.PENDING)
        predicate = _running_predicate(ScriptedClient([None]), seed=seed)
        assert predicate.last_seen is seed
        assert not predicate.refresh_attempted


class TestDecidableWithoutRefresh:
    @pytest.mark.parametrize("target", list(NodeStatus))
    def test_status_equals_target_passes(self, target: NodeStatus):
        client = ScriptedClient([None])
        predicate = StatusConvergencePredicate(target, NodeRefresher(client))
        snapshot = _node(target)

        assert predicate.evaluate(snapshot) is Decision.PASS
        assert client.calls == []
        assert predicate.last_seen is snapshot

    def test_invalid_status_fails(self):
        client = ScriptedClient([_node(NodeStatus.RUNNING)])
        predicate = _running_predicate(client)

        assert predicate.evaluate(_node(NodeStatus.ERROR)) is Decision.FAIL
        assert client.calls == []

    def test_any_invalid_status_fails(self):
        client = ScriptedClient([None])
        predicate = StatusConvergencePredicate(
            NodeStatus.RUNNING,
            NodeRefresher(client),
            invalid={NodeStatus.ERROR, NodeStatus.TERMINATED},
        )
        assert predicate.evaluate(_node(NodeStatus.TERMINATED)) is Decision.FAIL
        assert predicate.evaluate(_node(NodeStatus.ERROR)) is Decision.FAIL
        assert client.calls == []


class TestDoubleCheck:
    def test_pending_then_running_passes(self):
        fresh = _node(NodeStatus.RUNNING)
        client = ScriptedClient([fresh])
        predicate = _running_predicate(client)

        assert predicate.evaluate(_node(NodeStatus.PENDING)) is Decision.PASS
        assert client.calls == ["i-1"]
        assert predicate.last_seen is fresh

    def test_pending_then_error_fails(self):
        fresh = _node(NodeStatus.ERROR)
        client = ScriptedClient([fresh])
        predicate = _running_predicate(client)

        assert predicate.evaluate(_node(NodeStatus.PENDING)) is Decision.FAIL
        assert client.calls == ["i-1"]
        assert predicate.last_seen is fresh

    def test_still_pending_retries_and_remembers_fresh(self):
        fresh = _node(NodeStatus.PENDING).with_status(NodeStatus.UNRECOGNIZED)
        client = ScriptedClient([fresh])
        predicate = _running_predicate(client)

        assert predicate.evaluate(_node(NodeStatus.PENDING)) is Decision.RETRY
        assert client.calls == ["i-1"]
        assert predicate.last_seen is fresh

    def test_gone_retries(self):
        original = _node(NodeStatus.PENDING)
        client = ScriptedClient([None])
        predicate = _running_predicate(client)

        assert predicate.evaluate(original) is Decision.RETRY
        assert client.calls == ["i-1"]
        assert predicate.last_seen is original

    def test_transport_error_retries(self):
        original = _node(NodeStatus.PENDING)
        client = ScriptedClient([ConnectionResetError("reset by peer")])
        predicate = _running_predicate(client)

        assert predicate.evaluate(original) is Decision.RETRY
        assert predicate.last_seen is original

    def test_malformed_response_retries(self):
        original = _node(NodeStatus.PENDING)
        client = ScriptedClient([json.JSONDecodeError("Expecting value", "<html>", 0)])
        predicate = _running_predicate(client)

        assert predicate.evaluate(original) is Decision.RETRY
        assert predicate.last_seen is original

    def test_transport_error_from_client_retries(self):
        client = ScriptedClient([TransportError("i-1", "401 unauthorized")])
        predicate = _running_predicate(client)
        assert predicate.evaluate(_node(NodeStatus.PENDING)) is Decision.RETRY

    def test_different_identity_is_ignored(self):
        original = _node(NodeStatus.PENDING)
        client = ScriptedClient([_node(NodeStatus.RUNNING, node_id="i-2")])
        predicate = _running_predicate(client)

        assert predicate.evaluate(original) is Decision.RETRY
        assert predicate.last_seen is original

    def test_unrecognized_status_is_transitional(self):
        client = ScriptedClient([_node(NodeStatus.RUNNING)])
        predicate = _running_predicate(client)
        assert predicate.evaluate(_node(NodeStatus.UNRECOGNIZED)) is Decision.PASS
        assert client.calls == ["i-1"]

    def test_one_refresh_per_call(self):
        client = ScriptedClient([_node(NodeStatus.PENDING)])
        predicate = _running_predicate(client)

        for expected in (1, 2, 3):
            predicate.evaluate(_node(NodeStatus.PENDING))
            assert len(client.calls) == expected

    def test_repeated_evaluation_is_idempotent(self):
        first = _node(NodeStatus.PENDING)
        second = _node(NodeStatus.PENDING)
        client = ScriptedClient([first, second])
        original = _node(NodeStatus.SUSPENDED)
        predicate = _running_predicate(client)

        assert predicate.evaluate(original) is Decision.RETRY
        assert predicate.last_seen is first
        assert predicate.evaluate(original) is Decision.RETRY
        assert predicate.last_seen is second


class TestMissingSnapshot:
    def test_absent_without_history_retries(self):
        client = ScriptedClient([None])
        predicate = _running_predicate(client)

        assert predicate.evaluate(None) is Decision.RETRY
        assert client.calls == []

    def test_absent_identity_without_history_retries(self):
        client = ScriptedClient([None])
        predicate = _running_predicate(client)

        assert predicate.evaluate(_node(NodeStatus.PENDING, node_id=None)) is Decision.RETRY
        assert client.calls == []

    def test_absent_falls_back_to_seed(self):
        client = ScriptedClient([_node(NodeStatus.RUNNING)])
        predicate = _running_predicate(client, seed=_node(NodeStatus.PENDING))

        assert predicate.evaluate(None) is Decision.PASS
        assert client.calls == ["i-1"]

    def test_absent_falls_back_to_last_refresh(self):
        client = ScriptedClient([_node(NodeStatus.PENDING), _node(NodeStatus.RUNNING)])
        predicate = _running_predicate(client)

        assert predicate.evaluate(_node(NodeStatus.PENDING)) is Decision.RETRY
        assert predicate.evaluate(None) is Decision.PASS
        assert client.calls == ["i-1", "i-1"]

    def test_absent_after_gone_keeps_retrying(self):
        client = ScriptedClient([None])
        predicate = _running_predicate(client)

        assert predicate.evaluate(_node(NodeStatus.PENDING)) is Decision.RETRY
        assert predicate.evaluate(None) is Decision.RETRY
        assert predicate.evaluate(None) is Decision.RETRY
        assert client.calls == ["i-1", "i-1", "i-1"]
        assert predicate.last_seen.id == "i-1"


class TestCallable:
    def test_call_delegates_to_evaluate(self):
        predicate = _running_predicate(ScriptedClient([None]))
        assert predicate(_node(NodeStatus.RUNNING)) is Decision.PASS

    def test_repr(self):
        predicate = _running_predicate(ScriptedClient([None]), seed=_node(NodeStatus.PENDING))
        assert repr(predicate) == (
            "StatusConvergencePredicate(target=running, invalid=['error'], last_seen=i-1)"
        )
