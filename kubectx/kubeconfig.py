"""Reading and editing kubeconfig documents while keeping their layout."""

from __future__ import annotations

import abc
from typing import Any

import yaml
from yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode

DEFAULT_NAMESPACE = "default"

_STR_TAG = "tag:yaml.org,2002:str"
_MAP_TAG = "tag:yaml.org,2002:map"


class KubeconfigError(Exception):
    """The kubeconfig could not be loaded, understood or changed."""


class Loader(abc.ABC):
    """Supplies the kubeconfig files to work on.

    Each file object offers ``read()``, ``write(data)``, ``reset()`` (truncate
    and rewind) and ``close()``.
    """

    @abc.abstractmethod
    def load(self) -> list[Any]:
        """Open and return the kubeconfig files; only the first one is used."""


def _value_of(node: Node | None, key: str) -> Node | None:
    """Return the value stored under ``key`` in a mapping node, if any."""
    if not isinstance(node, MappingNode):
        return None
    for key_node, value_node in node.value:
        if isinstance(key_node, ScalarNode) and key_node.value == key:
            return value_node
    return None


def _scalar_text(node: Node | None) -> str:
    return node.value if isinstance(node, ScalarNode) else ""


def _set_scalar(node: ScalarNode, value: str) -> None:
    node.value = value
    node.tag = _STR_TAG


def _str_node(value: str) -> ScalarNode:
    return ScalarNode(_STR_TAG, value)


class Kubeconfig:
    """A kubeconfig document obtained from a loader."""

    def __init__(self, loader: Loader) -> None:
        self._loader = loader
        self._file: Any = None
        self._root: Node | None = None

    def __enter__(self) -> Kubeconfig:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying file, if one was opened."""
        if self._file is not None:
            self._file.close()

    def parse(self) -> None:
        """Load the file and parse its first YAML document."""
        try:
            files = self._loader.load()
        except (KubeconfigError, OSError) as err:
            raise KubeconfigError(f"failed to load: {err}") from err
        if not files:
            raise KubeconfigError("failed to load: no kubeconfig files")

        self._file = files[0]
        documents = yaml.compose_all(self._file.read(), Loader=yaml.SafeLoader)
        try:
            root = next(documents, None)
        except yaml.YAMLError as err:
            raise KubeconfigError(f"failed to decode: {err}") from err
        finally:
            documents.close()
        if root is None:
            raise KubeconfigError("failed to decode: EOF")

        self._root = root
        if not isinstance(root, MappingNode):
            raise KubeconfigError("kubeconfig file is not a map document")

    def _dump(self) -> str:
        if self._root is None:
            raise KubeconfigError("kubeconfig is not parsed")
        return yaml.serialize(
            self._root, Dumper=yaml.SafeDumper, allow_unicode=True, width=1 << 30
        )

    def to_bytes(self) -> bytes:
        """Return the document as YAML bytes."""
        return self._dump().encode("utf-8")

    def save(self) -> None:
        """Replace the file contents with the current document."""
        if self._file is None:
            raise KubeconfigError("kubeconfig is not parsed")
        text = self._dump()
        try:
            self._file.reset()
        except OSError as err:
            raise KubeconfigError(f"failed to reset file: {err}") from err
        self._file.write(text)

    def _mapping_root(self) -> MappingNode:
        if not isinstance(self._root, MappingNode):
            raise KubeconfigError("kubeconfig file is not a map document")
        return self._root

    def _contexts_node(self) -> SequenceNode:
        contexts = _value_of(self._root, "contexts")
        if contexts is None:
            raise KubeconfigError('"contexts" entry is nil')
        if not isinstance(contexts, SequenceNode):
            raise KubeconfigError('"contexts" is not a sequence node')
        return contexts

    def _context_node(self, name: str) -> MappingNode:
        for context in self._contexts_node().value:
            name_node = _value_of(context, "name")
            if isinstance(name_node, ScalarNode) and name_node.value == name:
                return context
        raise KubeconfigError(f'context with name "{name}" not found')

    def context_names(self) -> list[str]:
        """Return the names of all context entries, in file order."""
        contexts = _value_of(self._root, "contexts")
        if not isinstance(contexts, SequenceNode):
            return []
        names = []
        for context in contexts.value:
            name_node = _value_of(context, "name")
            if name_node is not None:
                names.append(_scalar_text(name_node))
        return names

    def context_exists(self, name: str) -> bool:
        """Tell whether a context entry with this name exists."""
        return name in self.context_names()

    def current_context(self) -> str:
        """Return the current-context value, or an empty string if unset."""
        return _scalar_text(_value_of(self._root, "current-context"))

    def unset_current_context(self) -> None:
        """Blank the current-context value."""
        node = _value_of(self._root, "current-context")
        if isinstance(node, ScalarNode):
            _set_scalar(node, "")

    def modify_current_context(self, name: str) -> None:
        """Set current-context, adding the field if it is missing."""
        node = _value_of(self._root, "current-context")
        if isinstance(node, ScalarNode):
            _set_scalar(node, name)
            return
        root = self._mapping_root()
        if node is not None:
            root.value = [
                (k, v) for k, v in root.value if not (isinstance(k, ScalarNode) and k.value == "current-context")
            ]
        root.value.append((_str_node("current-context"), _str_node(name)))

    def modify_context_name(self, old: str, new: str) -> None:
        """Rename the first context entry called ``old``."""
        for context in self._contexts_node().value:
            name_node = _value_of(context, "name")
            if isinstance(name_node, ScalarNode) and name_node.value == old:
                _set_scalar(name_node, new)
                return
        raise KubeconfigError("no changes were made")

    def delete_context_entry(self, name: str) -> None:
        """Remove the first context entry called ``name``, if there is one."""
        contexts = self._contexts_node()
        for index, context in enumerate(contexts.value):
            name_node = _value_of(context, "name")
            if isinstance(name_node, ScalarNode) and name_node.value == name:
                del contexts.value[index]
                return

    def namespace_of_context(self, context_name: str) -> str:
        """Return the namespace of a context, or "default" when none is set."""
        body = _value_of(self._context_node(context_name), "context")
        if body is None:
            return DEFAULT_NAMESPACE
        namespace = _scalar_text(_value_of(body, "namespace"))
        return namespace or DEFAULT_NAMESPACE

    def set_namespace(self, context_name: str, namespace: str) -> None:
        """Set the namespace of a context, creating missing fields."""
        context = self._context_node(context_name)
        body = _value_of(context, "context")
        body_was_missing = body is None
        if body is None:
            body = MappingNode(_MAP_TAG, [])
        elif not isinstance(body, MappingNode):
            raise KubeconfigError(f'"context" entry of "{context_name}" is not a mapping')

        ns_node = _value_of(body, "namespace")
        if isinstance(ns_node, ScalarNode):
            _set_scalar(ns_node, namespace)
            return
        if ns_node is not None:
            body.value = [
                (k, v) for k, v in body.value if not (isinstance(k, ScalarNode) and k.value == "namespace")
            ]
        body.value.append((_str_node("namespace"), _str_node(namespace)))
        if body_was_missing:
            context.value.append((_str_node("context"), body))