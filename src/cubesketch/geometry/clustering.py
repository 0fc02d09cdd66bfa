"""
Angle-based grouping of fitted lines.

Canvas y grows downward, so a negative slope rises to the right on screen
and belongs to the right vanishing point; a positive slope belongs to the
left one.
"""

from cubesketch.config import ClusteringConfig
from cubesketch.models import GroupKind, LineGroups
from cubesketch.tracer import get_tracer, trace


def classify_angle(angle_degrees, config=None):
    """
    Assign a fitted angle to a perspective group.

    Vertical band is the open interval (vertical_min_angle,
    vertical_max_angle) on the absolute angle.
    """
    clustering = config.clustering if config is not None else ClusteringConfig()

    abs_angle = abs(angle_degrees)
    if clustering.vertical_min_angle < abs_angle < clustering.vertical_max_angle:
        return GroupKind.VERTICAL
    if angle_degrees < 0:
        return GroupKind.RIGHT
    return GroupKind.LEFT


@trace(label="cluster_lines")
def cluster_lines(lines, config=None):
    """
    Partition line indices into vertical, left and right groups.

    Every index lands in exactly one group, in input order.
    """
    tracer = get_tracer()

    buckets = {kind: [] for kind in GroupKind}
    for idx, line in enumerate(lines):
        buckets[classify_angle(line.angle_degrees, config)].append(idx)

    groups = LineGroups(
        vertical=buckets[GroupKind.VERTICAL],
        left=buckets[GroupKind.LEFT],
        right=buckets[GroupKind.RIGHT],
    )

    tracer.event(
        f"Groups: vertical={groups.vertical} left={groups.left} right={groups.right}"
    )

    return groups
