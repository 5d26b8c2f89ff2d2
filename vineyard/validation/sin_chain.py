"""Sin chain discoverability: can players actually uncover every sin?

Checks, in order:
- every sin has a starter fact (min trust <= STARTER_TRUST_MAX)
- the discovery dependency graph has no cycles
- every sin is reachable from the sins with trust-0 facts
- warns when only one NPC knows anything about a sin

The dependency graph is a label heuristic: a discovery rule whose label is a
sin's own topic label, and which names other sins, makes those sins
prerequisites of it, unless it already has a trust-0 fact of its own.
"""
from __future__ import annotations

from collections import deque

from vineyard.constants import ENTRY_TRUST, STARTER_TRUST_MAX
from vineyard.models.town import DiscoveryTopicRule, TownData
from vineyard.models.validation import ValidationIssue, ValidationResult
from vineyard.text_utils import to_kebab_id


def _all_facts(town: TownData):
    for npc in town.npcs:
        if npc.knowledge is None:
            continue
        for fact in npc.knowledge.facts:
            yield npc, fact


def _entry_sin_ids(town: TownData) -> list[str]:
    """Sins with at least one trust-0 fact, in first-seen order."""
    seen: dict[str, None] = {}
    for _, fact in _all_facts(town):
        if fact.sin_id and fact.min_trust_level == ENTRY_TRUST:
            seen.setdefault(fact.sin_id, None)
    return list(seen)


def build_dependency_graph(town: TownData) -> dict[str, list[str]]:
    """sin id -> sins it unlocks. Only sins in the chain appear as keys."""
    graph: dict[str, list[str]] = {sin.id: [] for sin in town.sin_chain}
    independent = set(_entry_sin_ids(town))
    label_to_id = {to_kebab_id(sin.name): sin.id for sin in town.sin_chain}

    for rule in town.topic_rules:
        if not isinstance(rule, DiscoveryTopicRule):
            continue
        target = label_to_id.get(rule.label)
        if target is None or target in independent:
            continue
        for required in rule.required_sin_ids:
            if required == target:
                continue
            edges = graph.get(required)
            if edges is not None and target not in edges:
                edges.append(target)
    return graph


def find_cycle_nodes(graph: dict[str, list[str]]) -> list[str]:
    """Every node that lies on a cycle, each reported once in discovery order.

    Iterative Tarjan: a node is on a cycle when its strongly connected
    component has two or more members, or when it has a self-loop.
    """
    index: dict[str, int] = {}
    low: dict[str, int] = {}
    stack: list[str] = []
    on_stack: set[str] = set()
    on_cycle: set[str] = set()

    for root in graph:
        if root in index:
            continue
        index[root] = low[root] = len(index)
        stack.append(root)
        on_stack.add(root)
        work = [(root, iter(graph.get(root, [])))]
        while work:
            node, edges = work[-1]
            nxt = next(edges, None)
            if nxt is not None:
                if nxt not in index:
                    index[nxt] = low[nxt] = len(index)
                    stack.append(nxt)
                    on_stack.add(nxt)
                    work.append((nxt, iter(graph.get(nxt, []))))
                elif nxt in on_stack:
                    low[node] = min(low[node], index[nxt])
                continue

            work.pop()
            if work:
                parent = work[-1][0]
                low[parent] = min(low[parent], low[node])
            if low[node] != index[node]:
                continue
            component: list[str] = []
            while True:
                member = stack.pop()
                on_stack.discard(member)
                component.append(member)
                if member == node:
                    break
            if len(component) > 1 or node in graph.get(node, []):
                on_cycle.update(component)

    return sorted(on_cycle, key=index.__getitem__)


def validate_sin_chain_discoverable(town: TownData) -> ValidationResult:
    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []

    for sin in town.sin_chain:
        has_starter = any(
            fact.sin_id == sin.id and fact.min_trust_level <= STARTER_TRUST_MAX for _, fact in _all_facts(town)
        )
        if not has_starter:
            errors.append(
                ValidationIssue(
                    type="unreachable-sin",
                    message=(
                        f'Sin "{sin.name}" ({sin.id}) has no starter fact with min_trust_level <= '
                        f"{STARTER_TRUST_MAX}. Players cannot discover this sin early enough."
                    ),
                    sin_id=sin.id,
                )
            )

    graph = build_dependency_graph(town)
    for sin_id in find_cycle_nodes(graph):
        errors.append(
            ValidationIssue(
                type="circular-dependency",
                message=(
                    f'Circular knowledge dependency detected: sin "{sin_id}" is part of a cycle. '
                    "Players may get stuck in an endless discovery loop."
                ),
                sin_id=sin_id,
            )
        )

    reachable = set(_entry_sin_ids(town))
    queue = deque(reachable)
    while queue:
        for nxt in graph.get(queue.popleft(), []):
            if nxt not in reachable:
                reachable.add(nxt)
                queue.append(nxt)
    for sin in town.sin_chain:
        if sin.id not in reachable:
            errors.append(
                ValidationIssue(
                    type="isolated-sin",
                    message=(
                        f'Sin "{sin.name}" ({sin.id}) is not reachable from default topics. '
                        "No path from trust-0 facts leads to discovering this sin."
                    ),
                    sin_id=sin.id,
                )
            )

    for sin in town.sin_chain:
        sources = {npc.id for npc, fact in _all_facts(town) if fact.sin_id == sin.id}
        if len(sources) == 1:
            warnings.append(
                ValidationIssue(
                    type="single-source",
                    message=(
                        f'Sin "{sin.name}" ({sin.id}) has only one NPC with knowledge about it. '
                        "If the player misses that NPC, the sin may be hard to discover."
                    ),
                    sin_id=sin.id,
                )
            )

    return ValidationResult.from_issues(errors, warnings)
