# tsumesight/core/quiz/scheduler.py
"""Question scheduling for one advanced move.

Liberty questions:
1. Keep candidate groups (liberties changed, or differing from the initial
   position under the final-move policy).
2. Sort by schedule_key: liberties ascending, just-played group first, then a
   draw from the engine's sequence.
3. Draw one representative vertex from each group.
4. Optionally drop saturated groups while another question remains.
5. Truncate to max_questions.

Staleness is tracked per stone (GroupScore.max_staleness) and logged with the
schedule, but it does not affect ordering: liberties ascending is the only
priority.

Comparison pairs are found in a separate pass anchored on the scheduled
liberty groups. Every draw comes from the RandomSequence passed in, in a
fixed order, so the schedule is reproducible.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Set, Tuple

from tsumesight.common.typed_config import QuizConfig
from tsumesight.core.board import Vertex
from tsumesight.core.quiz.models import ComparisonPair, GroupScore
from tsumesight.core.quiz.scoring import schedule_key
from tsumesight.core.random_sequence import RandomSequence
from tsumesight.core.sgf_parser import Move

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduledGroup:
    """A group chosen for a liberty question and its drawn target vertex."""

    group: GroupScore
    vertex: Vertex


def _libs_changed(group: GroupScore) -> bool:
    return group.libs_changed


def schedule_liberty_questions(
    groups: List[GroupScore],
    rng: RandomSequence,
    config: QuizConfig,
    candidate: Optional[Callable[[GroupScore], bool]] = None,
) -> List[ScheduledGroup]:
    """Select and order the liberty questions for the current move.

    Args:
        groups: Group Scorer output, in scan order
        rng: The engine's deterministic sequence
        config: Quiz settings (ceiling, saturation skip, cap)
        candidate: Filter for step 1; defaults to "liberties changed"

    Returns:
        At most config.max_questions scheduled groups, in asking order
    """
    if config.max_questions <= 0:
        return []
    keep = candidate or _libs_changed
    pool = [g for g in groups if keep(g)]

    keyed = [(schedule_key(g, rng.random()), g) for g in pool]
    keyed.sort(key=lambda item: item[0])

    scheduled = [ScheduledGroup(group=g, vertex=rng.choice(g.vertices)) for _, g in keyed]

    if config.skip_saturated:
        unsaturated = [s for s in scheduled if s.group.liberties < config.liberty_ceiling]
        if unsaturated:
            scheduled = unsaturated

    scheduled = scheduled[: config.max_questions]
    _log.debug(
        "Scheduled %d of %d candidate groups (vertex, liberties, staleness): %s",
        len(scheduled),
        len(pool),
        [(s.vertex, s.group.liberties, s.group.max_staleness) for s in scheduled],
    )
    return scheduled


def find_comparison_pairs(
    groups: List[GroupScore],
    anchors: List[ScheduledGroup],
    current_move: Move,
    rng: RandomSequence,
    config: QuizConfig,
) -> List[ComparisonPair]:
    """Pair adjacent opposite-owner groups with close liberty counts.

    A pair qualifies when the counts differ by at most
    config.comparison_max_diff and at least one side is an anchor. Each pair
    is produced once. The black group is always the first side.

    Ordering: liberty difference ascending; then pairs where the mover's
    opponent has more liberties (equal counts rank with them); then pairs
    touching the just-played chain; then a draw.
    """
    if config.max_questions <= 0 or not groups:
        return []

    group_of: Dict[Vertex, int] = {}
    for i, group in enumerate(groups):
        for v in group.vertices:
            group_of[v] = i
    anchor_ids = {group_of[a.group.vertices[0]] for a in anchors if a.group.vertices[0] in group_of}
    if not anchor_ids:
        return []

    seen: Set[Tuple[int, int]] = set()
    found: List[Tuple[ComparisonPair, int, int]] = []
    for i, ga in enumerate(groups):
        for x, y in ga.vertices:
            for neighbor in ((x - 1, y), (x + 1, y), (x, y - 1), (x, y + 1)):
                j = group_of.get(neighbor)
                if j is None or j == i:
                    continue
                key = (min(i, j), max(i, j))
                if key in seen:
                    continue
                seen.add(key)
                gb = groups[j]
                if gb.sign == ga.sign:
                    continue
                if abs(ga.liberties - gb.liberties) > config.comparison_max_diff:
                    continue
                if i not in anchor_ids and j not in anchor_ids:
                    continue
                va = rng.choice(ga.vertices)
                vb = rng.choice(gb.vertices)
                if ga.sign == 1:
                    pair = ComparisonPair(v1=va, v2=vb, libs1=ga.liberties, libs2=gb.liberties)
                else:
                    pair = ComparisonPair(v1=vb, v2=va, libs1=gb.liberties, libs2=ga.liberties)
                found.append((pair, i, j))

    current_group = group_of.get(current_move.coords) if current_move.coords is not None else None
    mover = current_move.sign

    def sort_key(item: Tuple[ComparisonPair, int, int, float]) -> Tuple[int, int, int, float]:
        pair, i, j, draw = item
        # libs1 is black, so (libs1 - libs2) * -mover > 0 means the opponent has more
        opponent_more = 0 if pair.diff == 0 or (pair.libs1 - pair.libs2) * -mover > 0 else 1
        touches_current = 0 if current_group in (i, j) else 1
        return (pair.diff, opponent_more, touches_current, draw)

    drawn = [(pair, i, j, rng.random()) for pair, i, j in found]
    drawn.sort(key=sort_key)
    pairs = [item[0] for item in drawn[: config.max_questions]]
    _log.debug("Found %d comparison pairs, keeping %d", len(found), len(pairs))
    return pairs
