"""Reserved sentinel node names.

START and END mark where a run enters and leaves the graph. They may appear
as edge endpoints but are never registered as nodes.
"""

START = "__start__"
END = "__end__"

SENTINELS = frozenset({START, END})
