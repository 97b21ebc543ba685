from __future__ import annotations

from typing import Any, Dict, Iterator, List, Literal, Optional, Sequence

from .types import Element, ElementType, MaskType, Widget
from .utils import new_id

DropPosition = Literal["before", "after", "inside"]


def new_element(type: ElementType, **extra: Any) -> Element:
    data: Dict[str, Any] = {
        "type": type,
        "name": f"New {type}",
        "x": 20,
        "y": 20,
        "width": 280 if type == "text" else 200,
        "height": 60 if type == "text" else 200,
        "fill": "#3b82f6",
        "border_radius": 0,
        "font_size": 48,
        "color": "#ffffff",
        "font_family": "Inter",
        "text_align": "center",
        "font_weight": "600",
        "content": "Text" if type == "text" else "",
        "shape_type": "rectangle",
        "animation_name": "none",
        "animation_duration": 1,
        "animation_delay": 0,
        "animation_iteration_count": "1",
    }
    data.update(extra)
    return Element(**data)


def new_group(**extra: Any) -> Element:
    data: Dict[str, Any] = {
        "type": "group", "name": "Group",
        "x": 20, "y": 20, "width": 300, "height": 200,
        "blend_mode": "normal", "children": [],
    }
    data.update(extra)
    return Element(**data)


def new_mask(mask_type: MaskType = "clip", **extra: Any) -> Element:
    data: Dict[str, Any] = {
        "type": "mask", "name": f"{mask_type} mask",
        "x": 20, "y": 20, "width": 300, "height": 200,
        "mask_type": mask_type, "clip_radius": 0,
        "gradient_dir": "to bottom", "gradient_start_opacity": 1, "gradient_end_opacity": 0,
        "blend_mode": "normal", "children": [],
    }
    data.update(extra)
    return Element(**data)


def iter_elements(elements: Sequence[Element]) -> Iterator[Element]:
    for el in elements:
        yield el
        if el.children:
            yield from iter_elements(el.children)


def flatten_elements(elements: Sequence[Element]) -> List[Element]:
    return list(iter_elements(elements))


def find_element(elements: Sequence[Element], element_id: str) -> Optional[Element]:
    for el in iter_elements(elements):
        if el.id == element_id:
            return el
    return None


def find_parent(elements: Sequence[Element], element_id: str) -> Optional[Element]:
    for el in iter_elements(elements):
        if el.children and any(c.id == element_id for c in el.children):
            return el
    return None


def is_descendant(ancestor: Element, element_id: str) -> bool:
    return find_element(ancestor.children or [], element_id) is not None


def patch_element(elements: Sequence[Element], element_id: str, changes: Dict[str, Any]) -> bool:
    el = find_element(elements, element_id)
    if el is None:
        return False
    for key, value in changes.items():
        if key in Element.model_fields and key not in ("id", "children"):
            setattr(el, key, value)
    return True


def remove_element(elements: List[Element], element_id: str) -> Optional[Element]:
    """Detach an element from wherever it sits in the tree and return it."""
    for i, el in enumerate(elements):
        if el.id == element_id:
            return elements.pop(i)
        if el.children:
            found = remove_element(el.children, element_id)
            if found is not None:
                return found
    return None


def add_element(widget: Widget, element: Element, group_id: Optional[str] = None) -> Element:
    element.z_index = len(widget.elements)
    group = find_element(widget.elements, group_id) if group_id else None
    if group is not None and group.is_container:
        if group.children is None:
            group.children = []
        group.children.append(element)
    else:
        widget.elements.append(element)
    return element


def duplicate_element(element: Element, root: bool = True) -> Element:
    """Deep copy with fresh ids; the top-level copy is nudged and renamed."""
    clone = element.model_copy(update={"id": new_id()})
    if root:
        clone.x += 20
        clone.y += 20
        clone.name = f"{element.name} (Copy)"
    if element.children is not None:
        clone.children = [duplicate_element(child, root=False) for child in element.children]
    return clone


def _sort_desc(nodes: List[Element]) -> None:
    nodes.sort(key=lambda n: n.z_index, reverse=True)
    for n in nodes:
        if n.children:
            _sort_desc(n.children)


def _renumber(nodes: List[Element]) -> None:
    for i, n in enumerate(nodes):
        n.z_index = len(nodes) - 1 - i
        if n.children:
            _renumber(n.children)


def _insert(nodes: List[Element], dragged: Element, target_id: str, position: DropPosition) -> bool:
    for idx, node in enumerate(nodes):
        if node.id == target_id:
            if position == "inside" and node.is_container:
                if node.children is None:
                    node.children = []
                node.children.append(dragged)
            else:
                nodes.insert(idx if position == "before" else idx + 1, dragged)
            return True
    for node in nodes:
        if node.children and _insert(node.children, dragged, target_id, position):
            return True
    return False


def move_layer(widget: Widget, dragged_id: str, target_id: str, position: DropPosition) -> bool:
    """Re-parent or reorder a layer relative to ``target_id``.

    Sibling lists are kept in descending z-order, matching the layers panel,
    so ``before`` means "drawn above". Moves that would put an element inside
    itself, or that reference unknown ids, leave the tree untouched.
    """
    if dragged_id == target_id:
        return False
    dragged = find_element(widget.elements, dragged_id)
    if dragged is None or find_element(widget.elements, target_id) is None:
        return False
    if is_descendant(dragged, target_id):
        return False

    _sort_desc(widget.elements)
    remove_element(widget.elements, dragged_id)
    _insert(widget.elements, dragged, target_id, position)
    _renumber(widget.elements)
    return True


def remove_from_group(widget: Widget, element_id: str, group_id: str) -> bool:
    """Lift a child out of its group, keeping its on-canvas position."""
    group = find_element(widget.elements, group_id)
    if group is None or not group.children:
        return False
    child = next((c for c in group.children if c.id == element_id), None)
    if child is None:
        return False
    group.children = [c for c in group.children if c.id != element_id]
    child.x = group.x + child.x
    child.y = group.y + child.y
    widget.elements.append(child)
    return True
