"""Tests for execution records."""

from aigraph.core.graph import ExecutionTrace, NodeStatus, StepEvent
from aigraph.core.graph.state import NodeRun


class TestExecutionTrace:
    """Test suite for ExecutionTrace bookkeeping."""

    def test_trace_init(self):
        trace = ExecutionTrace()
        assert trace.runs == []
        assert trace.path == []
        assert not trace.succeeded

    def test_start_and_complete(self):
        trace = ExecutionTrace()
        run = trace.start("a")
        assert trace.status["a"] == NodeStatus.RUNNING
        trace.complete(run)
        trace.finish()
        assert run.status == NodeStatus.COMPLETED
        assert run.duration is not None and run.duration >= 0
        assert trace.succeeded

    def test_fail(self):
        trace = ExecutionTrace()
        run = trace.start("a")
        trace.fail(run, "broken")
        assert run.error == "broken"
        assert trace.errors == {"a": "broken"}
        assert trace.status["a"] == NodeStatus.ERROR

    def test_repeated_node(self):
        """Test loops record one run per invocation."""
        trace = ExecutionTrace()
        for _ in range(3):
            trace.complete(trace.start("loop"))
        assert trace.path == ["loop", "loop", "loop"]
        assert len(trace.status) == 1


class TestRecords:
    def test_node_run_duration_pending(self):
        assert NodeRun(node="a").duration is None

    def test_step_event_holds_any_state(self):
        state = object()
        event = StepEvent(step=1, node="a", next_node="b", state=state)
        assert event.state is state
        assert event.label is None
