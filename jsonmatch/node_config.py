"""Path-addressed configuration tree for validation options."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field, replace
from typing import Callable, Optional, Union

from .models import BOOLEAN_OPTIONS, OptionKind, Scope
from .path import JSONPath, PathComponent, as_path


@dataclass
class Defaults:
    """Option values inherited by a node and, under subtree scope, its descendants."""
    any_order: bool = False
    exact_match: bool = True
    equal_count: bool = False
    key_must_be_absent: bool = False
    value_not_equal: bool = False


@dataclass
class NodeConfig:
    """
    Validation options for one location in the expected document.

    Each per-node option is None when unset, which means "use the defaults
    bundle". False is an explicit override. Children are keyed by object key
    or stringified array index; ``wildcard`` is the template for every key
    or index not listed in ``children``.
    """
    name: Optional[str] = None
    defaults: Defaults = field(default_factory=Defaults)

    any_order: Optional[bool] = None
    exact_match: Optional[bool] = None
    equal_count: Optional[bool] = None
    key_must_be_absent: Optional[bool] = None
    value_not_equal: Optional[bool] = None
    element_count: Optional[int] = None

    children: dict[str, NodeConfig] = field(default_factory=dict)
    wildcard: Optional[NodeConfig] = None

    # Resolved accessors

    @property
    def is_any_order(self) -> bool:
        return self._resolved(OptionKind.ANY_ORDER)

    @property
    def is_exact_match(self) -> bool:
        return self._resolved(OptionKind.EXACT_MATCH)

    @property
    def is_equal_count(self) -> bool:
        return self._resolved(OptionKind.EQUAL_COUNT)

    @property
    def is_key_must_be_absent(self) -> bool:
        return self._resolved(OptionKind.KEY_MUST_BE_ABSENT)

    @property
    def is_value_not_equal(self) -> bool:
        return self._resolved(OptionKind.VALUE_NOT_EQUAL)

    def _resolved(self, kind: OptionKind) -> bool:
        value = getattr(self, kind.value)
        if value is None:
            return getattr(self.defaults, kind.value)
        return value

    # Child access

    def get_child(self, name: Union[str, int, None]) -> Optional[NodeConfig]:
        if name is None:
            return None
        return self.children.get(str(name))

    def resolved_child(self, name: Union[str, int, None]) -> NodeConfig:
        """
        Return the fully resolved configuration for a child.

        Each option is taken from the child's own override, else the
        wildcard template's override. Unset options fall back to the child's
        defaults, else the wildcard's, else this node's. This node's own
        overrides never apply to the child.
        """
        if name is None:
            return NodeConfig(defaults=replace(self.defaults))

        name = str(name)
        child = self.children.get(name)
        wildcard = self.wildcard

        if child is not None:
            defaults = child.defaults
        elif wildcard is not None:
            defaults = wildcard.defaults
        else:
            defaults = self.defaults

        resolved = NodeConfig(name=name, defaults=replace(defaults))

        if child is not None:
            resolved.children = dict(child.children)
        elif wildcard is not None:
            resolved.children = dict(wildcard.children)

        if child is not None and child.wildcard is not None:
            resolved.wildcard = child.wildcard
        elif wildcard is not None:
            resolved.wildcard = wildcard.wildcard

        for kind in OptionKind:
            value = getattr(child, kind.value) if child is not None else None
            if value is None and wildcard is not None:
                value = getattr(wildcard, kind.value)
            setattr(resolved, kind.value, value)

        return resolved

    # Option setting

    def set_option(
        self,
        kind: OptionKind,
        value: Union[bool, int],
        path: Union[str, JSONPath] = JSONPath.root,
        scope: Scope = Scope.SINGLE_NODE
    ) -> None:
        """
        Set an option at a path, creating intermediate nodes as needed.

        Under single-node scope the node's own override is set. Under subtree
        scope the node's defaults bundle is updated and pushed down to every
        existing descendant. Element count only ever applies to the node itself.

        Propagation copies the whole defaults bundle, not just the field that
        was set. A later subtree call on an ancestor therefore resets subtree
        defaults set earlier on its descendants; apply ancestor subtree
        options first.
        """
        scope = Scope(scope)

        if kind is OptionKind.ELEMENT_COUNT or scope is Scope.SINGLE_NODE:
            def apply(node: NodeConfig) -> None:
                setattr(node, kind.value, value)
        else:
            def apply(node: NodeConfig) -> None:
                setattr(node.defaults, kind.value, value)
                node._propagate_defaults()

        self._navigate(as_path(path).components, apply)

    def set_any_order(self, value: bool, path=JSONPath.root, scope=Scope.SINGLE_NODE) -> None:
        self.set_option(OptionKind.ANY_ORDER, value, path, scope)

    def set_exact_match(self, value: bool, path=JSONPath.root, scope=Scope.SINGLE_NODE) -> None:
        self.set_option(OptionKind.EXACT_MATCH, value, path, scope)

    def set_equal_count(self, value: bool, path=JSONPath.root, scope=Scope.SINGLE_NODE) -> None:
        self.set_option(OptionKind.EQUAL_COUNT, value, path, scope)

    def set_key_must_be_absent(self, value: bool, path=JSONPath.root, scope=Scope.SINGLE_NODE) -> None:
        self.set_option(OptionKind.KEY_MUST_BE_ABSENT, value, path, scope)

    def set_value_not_equal(self, value: bool, path=JSONPath.root, scope=Scope.SINGLE_NODE) -> None:
        self.set_option(OptionKind.VALUE_NOT_EQUAL, value, path, scope)

    def set_element_count(self, count: int, path=JSONPath.root) -> None:
        self.set_option(OptionKind.ELEMENT_COUNT, count, path)

    # Navigation

    def _navigate(
        self,
        components: tuple[PathComponent, ...],
        apply: Callable[[NodeConfig], None]
    ) -> None:
        if not components:
            apply(self)
            return

        component, remaining = components[0], components[1:]

        if component.is_wildcard:
            if self.wildcard is None:
                self.wildcard = NodeConfig(
                    name=component.node_name,
                    defaults=replace(self.defaults)
                )
            self.wildcard._navigate(remaining, apply)

            # Wildcard settings also reach children that already exist
            for child in self.children.values():
                child._navigate(remaining, apply)
        else:
            self._ensure_child(component.node_name)._navigate(remaining, apply)

    def _ensure_child(self, name: str) -> NodeConfig:
        child = self.children.get(name)
        if child is not None:
            return child

        if self.wildcard is not None:
            child = deepcopy(self.wildcard)
            child.name = name
        else:
            child = NodeConfig(name=name, defaults=replace(self.defaults))

        self.children[name] = child
        return child

    def _propagate_defaults(self) -> None:
        if self.wildcard is not None:
            self.wildcard.defaults = replace(self.defaults)
            self.wildcard._propagate_defaults()

        for child in self.children.values():
            child.defaults = replace(self.defaults)
            child._propagate_defaults()

    # Debugging

    def describe(self, indentation: int = 0) -> str:
        """Render the tree as indented text."""
        indent = "  " * indentation
        lines = [f"{indent}Name: {self.name if self.name is not None else '<Unnamed>'}"]

        active = [kind.value for kind in BOOLEAN_OPTIONS if self._resolved(kind)]
        if self.element_count is not None:
            active.append(f"element_count({self.element_count})")
        lines.append(f"{indent}Options: {', '.join(active) if active else '(defaults)'}")

        if self.children:
            lines.append(f"{indent}Children:")
            for key in sorted(self.children):
                lines.append(self.children[key].describe(indentation + 1))
        if self.wildcard is not None:
            lines.append(f"{indent}Wildcard:")
            lines.append(self.wildcard.describe(indentation + 1))

        return "\n".join(lines)
