"""Hook-path extraction from a parsed JavaScript tree.

Two entry points:

* :func:`extract_chain` resolves one member/identifier expression into a
  :class:`~hookreg_cli.models.Chain` (``this.profile.getName``).
* :func:`traverse` walks the whole tree up to a depth bound and emits a raw
  :class:`~hookreg_cli.models.Path` for every function, method and property
  access it recognises.

Extraction is best effort: a node that cannot be resolved simply produces
nothing, it never stops the walk.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Tuple

from .config import AnalysisConfig
from .errors import ConfigError
from .js_parser import FUNCTION_KINDS, JsNode, NodeKind
from .models import (
    UNRESOLVED_SEGMENT,
    Chain,
    HookTarget,
    Path,
    PathContext,
    PathKind,
    render_segments,
    segment_name,
)

logger = logging.getLogger(__name__)

TIE_BREAKS = ("first", "last")

Prefix = Tuple[str, ...]


# ===================================================================
# Chains
# ===================================================================

def property_segment(prop: Optional[JsNode], computed: bool) -> Optional[str]:
    """Render the property side of a member access as a segment."""
    if prop is None:
        return None
    if computed:
        if prop.kind is NodeKind.LITERAL:
            return f'["{prop.literal}"]'
        if prop.kind is NodeKind.IDENTIFIER:
            return f"[{prop.name}]"
        return UNRESOLVED_SEGMENT
    if prop.kind is NodeKind.IDENTIFIER:
        return prop.name
    return None


def extract_chain(node: Optional[JsNode]) -> Optional[Chain]:
    """Resolve *node* to a root-to-leaf chain, or None.

    Only chains rooted at an identifier or ``this`` are supported; anything
    else at the root (a call result, a literal, ``new X()``) yields None.
    """
    segments: List[str] = []
    current = node
    while current is not None:
        if current.kind is NodeKind.MEMBER:
            segment = property_segment(current.property, current.computed)
            if segment is None:
                return None
            segments.append(segment)
            current = current.object
        elif current.kind is NodeKind.IDENTIFIER:
            segments.append(current.name)
            break
        elif current.kind is NodeKind.THIS:
            segments.append("this")
            break
        else:
            return None
    else:
        return None

    segments.reverse()
    return Chain(tuple(segments))


def _key_segment(prop: JsNode) -> Optional[str]:
    """Segment for an object-literal key."""
    key = prop.key
    if key is None:
        return None
    if prop.computed:
        return property_segment(key, computed=True)
    if key.kind is NodeKind.IDENTIFIER:
        return key.name
    if key.kind is NodeKind.LITERAL:
        return key.literal
    return None


# ===================================================================
# Dispatch
# ===================================================================

def _chain_path(
    chain: Chain,
    kind: PathKind,
    context: PathContext,
    node: JsNode,
    argument_count: Optional[int] = None,
) -> Optional[Path]:
    name = chain.name
    if name is None:
        return None
    return Path(
        kind=kind,
        name=name,
        text=chain.render(),
        context=context,
        segments=chain.segments,
        computed=chain.computed,
        argument_count=argument_count,
        line=node.line,
    )


def _on_member(node: JsNode, prefix: Prefix) -> Optional[Path]:
    chain = extract_chain(node)
    if chain is None:
        return None
    return _chain_path(chain, PathKind.PROPERTY, PathContext.PROPERTY_ACCESS, node)


def _on_call(node: JsNode, prefix: Prefix) -> Optional[Path]:
    callee = node.callee
    chain = extract_chain(callee)
    if chain is None:
        return None
    kind = PathKind.METHOD if callee.kind is NodeKind.MEMBER else PathKind.FUNCTION
    return _chain_path(
        chain, kind, PathContext.FUNCTION_CALL, node,
        argument_count=len(node.arguments),
    )


def _on_function_declaration(node: JsNode, prefix: Prefix) -> Optional[Path]:
    ident = node.id
    if ident is None or not ident.name:
        return None
    return Path(
        kind=PathKind.FUNCTION,
        name=ident.name,
        text=ident.name,
        context=PathContext.DECLARATION,
        segments=(ident.name,),
        parameter_count=len(node.params),
        line=node.line,
    )


def _on_property(node: JsNode, prefix: Prefix) -> Optional[Path]:
    value = node.value
    if value is None or value.kind not in FUNCTION_KINDS:
        return None
    segment = _key_segment(node)
    if segment is None:
        return None
    segments = prefix + (segment,)
    return Path(
        kind=PathKind.METHOD,
        name=segment_name(segment) or segment,
        text=render_segments(segments),
        context=PathContext.OBJECT_METHOD,
        segments=segments,
        computed=node.computed,
        parameter_count=len(value.params),
        line=node.line,
    )


def _on_assignment(node: JsNode, prefix: Prefix) -> Optional[Path]:
    left = node.left
    if left is None or left.kind is not NodeKind.MEMBER:
        return None
    chain = extract_chain(left)
    if chain is None:
        return None
    return _chain_path(chain, PathKind.PROPERTY, PathContext.ASSIGNMENT, node)


def _on_variable_declarator(node: JsNode, prefix: Prefix) -> Optional[Path]:
    ident = node.id
    init = node.init
    if ident is None or ident.kind is not NodeKind.IDENTIFIER or init is None:
        return None
    if init.kind not in FUNCTION_KINDS:
        return None
    return Path(
        kind=PathKind.FUNCTION,
        name=ident.name,
        text=ident.name,
        context=PathContext.VARIABLE_FUNCTION,
        segments=(ident.name,),
        parameter_count=len(init.params),
        line=node.line,
    )


_HANDLERS: Dict[NodeKind, Callable[[JsNode, Prefix], Optional[Path]]] = {
    NodeKind.MEMBER: _on_member,
    NodeKind.CALL: _on_call,
    NodeKind.FUNCTION_DECLARATION: _on_function_declaration,
    NodeKind.PROPERTY: _on_property,
    NodeKind.ASSIGNMENT: _on_assignment,
    NodeKind.VARIABLE_DECLARATOR: _on_variable_declarator,
}


def _child_prefixes(node: JsNode, prefix: Prefix) -> List[Tuple[JsNode, Prefix]]:
    """Pair each child with the object-literal prefix it is reached under.

    The prefix names the object an object literal is bound to and only flows
    into that literal and its nested literals; every other child starts over
    with an empty prefix.
    """
    children = node.children()
    target: Optional[JsNode] = None
    target_prefix: Prefix = ()

    if node.kind is NodeKind.OBJECT:
        return [(child, prefix) for child in children]
    if node.kind is NodeKind.VARIABLE_DECLARATOR:
        ident, init = node.id, node.init
        if ident is not None and ident.kind is NodeKind.IDENTIFIER and init is not None:
            target, target_prefix = init, (ident.name,)
    elif node.kind is NodeKind.ASSIGNMENT:
        chain = extract_chain(node.left)
        if chain is not None:
            target, target_prefix = node.right, chain.segments
    elif node.kind is NodeKind.PROPERTY:
        segment = _key_segment(node)
        if segment is not None:
            target, target_prefix = node.value, prefix + (segment,)

    paired = [(child, ()) for child in children]
    if target is not None and target.kind is NodeKind.OBJECT and paired:
        # the bound value is always the last field (init, right, value)
        paired[-1] = (paired[-1][0], target_prefix)
    return paired


def traverse(root: JsNode, config: Optional[AnalysisConfig] = None) -> List[Path]:
    """Bounded pre-order walk emitting raw (un-deduplicated) paths.

    The root sits at level 0. Every node at a level ``<= config.depth`` is
    dispatched once; deeper nodes are never visited.
    """
    config = config or AnalysisConfig()
    max_depth = config.depth
    paths: List[Path] = []

    stack: List[Tuple[JsNode, Prefix, int]] = [(root, (), 0)]
    while stack:
        node, prefix, level = stack.pop()

        handler = _HANDLERS.get(node.kind)
        if handler is not None:
            path = handler(node, prefix)
            if path is not None:
                paths.append(path)

        if level >= max_depth:
            continue
        for child, child_prefix in reversed(_child_prefixes(node, prefix)):
            stack.append((child, child_prefix, level + 1))

    logger.debug("Traversal to depth %d emitted %d paths", max_depth, len(paths))
    return paths


# ===================================================================
# Tail-target search
# ===================================================================

def chain_ends_with(chain: Chain, tail: Tuple[str, ...]) -> bool:
    if not tail or len(chain) < len(tail):
        return False
    return chain.segments[-len(tail):] == tuple(tail)


def find_best_chain(
    root: JsNode,
    target: HookTarget,
    tie_break: str = "first",
) -> Optional[Chain]:
    """Find the shortest chain in the whole tree ending with *target*.

    Call targets are matched against call callees, anything else against
    member expressions. Only dotted chains qualify; anything with bracket
    access is skipped. Among chains of the minimal length *tie_break* picks
    the first or the last one met in source order.
    """
    if tie_break not in TIE_BREAKS:
        raise ConfigError(f"tie_break must be one of {TIE_BREAKS}, got {tie_break!r}")

    best: Optional[Chain] = None
    for node in root.walk():
        if target.is_call:
            if node.kind is not NodeKind.CALL:
                continue
            candidate = node.callee
        elif node.kind is NodeKind.MEMBER:
            candidate = node
        else:
            continue

        chain = extract_chain(candidate)
        if chain is None or chain.computed:
            continue
        if not chain_ends_with(chain, target.segments):
            continue
        if best is None or len(chain) < len(best):
            best = chain
        elif tie_break == "last" and len(chain) == len(best):
            best = chain

    return best
