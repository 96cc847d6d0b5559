"""Test suite for the aigraph graph system.

1. Builder Tests (test_base.py)
   - Node registration
   - Edge and conditional edge registration

2. Compilation (test_compile.py)
   - Validation rules
   - Idempotence and snapshots

3. Execution (test_execute.py)
   - Routing and termination
   - Failure propagation
   - Limits, timeouts and cancellation

4. Visualization (test_viz.py)

5. Configuration and records (test_config.py, test_state.py)

6. Nodes (nodes/)
   - Node and edge models
   - LLM helpers
"""
