"""
Group bookkeeping.

Groups are plain records keyed by id. Every function takes the current
groups dict and returns a new one; nothing here keeps state between calls.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from models.shape import Group, Shape, _generate_id

logger = logging.getLogger(__name__)


def get_group_for_shape(shape_id: str, groups: Mapping[str, Group]) -> Optional[Group]:
    """Get the first group that lists shape_id as a direct member."""
    for group in groups.values():
        if shape_id in group.member_ids:
            return group
    return None


def get_top_level_group(shape_id: str, groups: Mapping[str, Group]) -> Optional[Group]:
    """
    Get the group that should be selected when clicking a shape.

    Walks up the parent chain from the shape's own group. A dangling parent
    reference stops the walk at the last group found.
    """
    group = get_group_for_shape(shape_id, groups)
    if group is None:
        return None

    seen = {group.id}
    while group.parent_group_id:
        parent = groups.get(group.parent_group_id)
        if parent is None or parent.id in seen:
            break
        seen.add(parent.id)
        group = parent
    return group


def get_all_group_shape_ids(group_id: str, groups: Mapping[str, Group]) -> List[str]:
    """Get the shape ids of a group and all of its nested child groups."""
    group = groups.get(group_id)
    if group is None:
        return []

    shape_ids = list(group.member_ids)
    for child in groups.values():
        if child.parent_group_id == group_id and child.id != group_id:
            shape_ids.extend(get_all_group_shape_ids(child.id, groups))
    return shape_ids


def is_complete_group_selected(selected_ids: List[str], groups: Mapping[str, Group]) -> Optional[Group]:
    """
    Check whether the selection is exactly the members of one group.

    Returns:
        The matching group, or None
    """
    if len(selected_ids) < 2:
        return None

    for group in groups.values():
        selected_in_group = [sid for sid in selected_ids if sid in group.member_ids]
        if len(selected_in_group) == len(group.member_ids) == len(selected_ids):
            return group
    return None


def create_group(
    groups: Mapping[str, Group],
    shape_ids: List[str],
    group_id: Optional[str] = None,
) -> Tuple[Dict[str, Group], Optional[str]]:
    """
    Create a group from shape ids.

    Existing groups that contain any of the shapes become children of the
    new group.

    Args:
        groups: Current groups
        shape_ids: Members of the new group
        group_id: Id to use (generated when omitted)

    Returns:
        Tuple of (new groups dict, new group id). With fewer than two shapes
        nothing is created and the id is None.
    """
    if len(shape_ids) < 2:
        return dict(groups), None

    new_id = group_id or _generate_id()

    child_ids = []
    for shape_id in shape_ids:
        existing = get_group_for_shape(shape_id, groups)
        if existing is not None and existing.id not in child_ids:
            child_ids.append(existing.id)

    new_groups = dict(groups)
    for child_id in child_ids:
        new_groups[child_id] = new_groups[child_id].copy(parent_group_id=new_id)
    new_groups[new_id] = Group(id=new_id, member_ids=list(shape_ids))

    logger.debug(f"Created group {new_id} with {len(shape_ids)} shapes, {len(child_ids)} child groups")
    return new_groups, new_id


def ungroup(groups: Mapping[str, Group], group_id: str) -> Tuple[Dict[str, Group], List[str]]:
    """
    Remove a group.

    Child groups lose their parent reference but stay intact.

    Returns:
        Tuple of (new groups dict, former member ids). An unknown group id
        returns the groups unchanged and an empty list.
    """
    group = groups.get(group_id)
    if group is None:
        return dict(groups), []

    new_groups = {}
    for gid, g in groups.items():
        if gid == group_id:
            continue
        if g.parent_group_id == group_id:
            new_groups[gid] = g.copy(parent_group_id=None)
        else:
            new_groups[gid] = g

    logger.debug(f"Ungrouped {group_id} ({len(group.member_ids)} shapes)")
    return new_groups, list(group.member_ids)


def sync_groups_from_shapes(groups: Mapping[str, Group], shapes: Iterable[Shape]) -> Dict[str, Group]:
    """
    Rebuild group membership from the shapes' group_id fields.

    Groups no shape refers to are dropped, referenced groups that do not
    exist are created, and member lists follow the shapes.
    """
    members_by_group: Dict[str, List[str]] = {}
    for shape in shapes:
        if shape.group_id:
            members_by_group.setdefault(shape.group_id, []).append(shape.id)

    new_groups = {}
    for gid, member_ids in members_by_group.items():
        existing = groups.get(gid)
        if existing is None:
            new_groups[gid] = Group(id=gid, member_ids=member_ids)
        else:
            new_groups[gid] = existing.copy(member_ids=member_ids)
    return new_groups
