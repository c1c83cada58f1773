"""
Ambient (host-provided) namespaces.

The checker treats every name visible in the host's global namespace as
declared.  A host namespace is modelled as an ``AmbientNamespace``: a set of
names plus an optional parent namespace, mirroring a JavaScript global
object and its prototype chain.  Names inherited from any ancestor are
ambient too, so ``toString`` is never reported just because it lives on
``Object.prototype`` rather than on the global object itself.

Namespaces are plain data and are passed to ``check_program`` explicitly;
nothing in this module consults the running process.
"""

from __future__ import annotations

import json
import logging
from collections import ChainMap
from dataclasses import dataclass
from pathlib import Path
from typing import (
    Dict,
    FrozenSet,
    Iterable,
    Iterator,
    Mapping,
    Optional,
    Union,
)

logger = logging.getLogger(__name__)

__all__ = [
    "AmbientNamespace",
    "AmbientSource",
    "OBJECT_PROTOTYPE",
    "ECMASCRIPT",
    "BROWSER",
    "NODE",
    "EMPTY",
    "ENVIRONMENTS",
    "get_environment",
    "coerce_ambient",
    "load_globals_file",
]


@dataclass(frozen=True)
class AmbientNamespace:
    """A host namespace and, through ``parent``, its ancestors."""

    name: str
    names: FrozenSet[str]
    parent: Optional[AmbientNamespace] = None

    def chain(self) -> Iterator[AmbientNamespace]:
        """Yield this namespace, then each ancestor, innermost first."""
        namespace: Optional[AmbientNamespace] = self
        while namespace is not None:
            yield namespace
            namespace = namespace.parent

    def all_names(self) -> FrozenSet[str]:
        """Every name visible through this namespace."""
        result: set = set()
        for namespace in self.chain():
            result.update(namespace.names)
        return frozenset(result)

    def extend(self, name: str, names: Iterable[str]) -> AmbientNamespace:
        """Return a child namespace whose parent is this one."""
        return AmbientNamespace(name, frozenset(names), parent=self)

    def __contains__(self, name: object) -> bool:
        return any(name in namespace.names for namespace in self.chain())

    def __repr__(self) -> str:
        path = " -> ".join(namespace.name for namespace in self.chain())
        return f"AmbientNamespace({path}, {len(self.all_names())} names)"


# ---------------------------------------------------------------------------
# Built-in environments
# ---------------------------------------------------------------------------

EMPTY = AmbientNamespace("none", frozenset())

#: Own properties of ``Object.prototype``; every global object inherits them.
OBJECT_PROTOTYPE = AmbientNamespace("Object.prototype", frozenset({
    "constructor",
    "hasOwnProperty",
    "isPrototypeOf",
    "propertyIsEnumerable",
    "toLocaleString",
    "toString",
    "valueOf",
    "__proto__",
    "__defineGetter__",
    "__defineSetter__",
    "__lookupGetter__",
    "__lookupSetter__",
}))

ECMASCRIPT = OBJECT_PROTOTYPE.extend("ecmascript", {
    # Value properties
    "Infinity",
    "NaN",
    "undefined",
    "globalThis",
    # Function properties
    "eval",
    "isFinite",
    "isNaN",
    "parseFloat",
    "parseInt",
    "decodeURI",
    "decodeURIComponent",
    "encodeURI",
    "encodeURIComponent",
    "escape",
    "unescape",
    # Constructors
    "Object",
    "Function",
    "Array",
    "String",
    "Boolean",
    "Number",
    "Symbol",
    "Date",
    "RegExp",
    "Promise",
    "Proxy",
    "Map",
    "Set",
    "WeakMap",
    "WeakSet",
    "ArrayBuffer",
    "DataView",
    "Int8Array",
    "Uint8Array",
    "Uint8ClampedArray",
    "Int16Array",
    "Uint16Array",
    "Int32Array",
    "Uint32Array",
    "Float32Array",
    "Float64Array",
    # Errors
    "Error",
    "EvalError",
    "RangeError",
    "ReferenceError",
    "SyntaxError",
    "TypeError",
    "URIError",
    # Namespaces
    "Math",
    "JSON",
    "Reflect",
    "Intl",
})

BROWSER = ECMASCRIPT.extend("browser", {
    "window",
    "self",
    "top",
    "parent",
    "frames",
    "document",
    "navigator",
    "location",
    "history",
    "screen",
    "console",
    "performance",
    "localStorage",
    "sessionStorage",
    "alert",
    "confirm",
    "prompt",
    "atob",
    "btoa",
    "fetch",
    "setTimeout",
    "clearTimeout",
    "setInterval",
    "clearInterval",
    "requestAnimationFrame",
    "cancelAnimationFrame",
    "addEventListener",
    "removeEventListener",
    "dispatchEvent",
    "XMLHttpRequest",
    "Blob",
    "URL",
    "Worker",
    "Event",
    "CustomEvent",
    "Node",
    "Element",
    "HTMLElement",
})

NODE = ECMASCRIPT.extend("node", {
    "global",
    "process",
    "Buffer",
    "require",
    "module",
    "exports",
    "__dirname",
    "__filename",
    "console",
    "setTimeout",
    "clearTimeout",
    "setInterval",
    "clearInterval",
    "setImmediate",
    "clearImmediate",
})

ENVIRONMENTS: Dict[str, AmbientNamespace] = {
    "none": EMPTY,
    "ecmascript": ECMASCRIPT,
    "browser": BROWSER,
    "node": NODE,
}


def get_environment(name: str) -> AmbientNamespace:
    """Look up a built-in environment by name."""
    try:
        return ENVIRONMENTS[name]
    except KeyError:
        known = ", ".join(sorted(ENVIRONMENTS))
        raise KeyError(f"unknown environment '{name}' (known: {known})") from None


# ---------------------------------------------------------------------------
# Coercion & loading
# ---------------------------------------------------------------------------

#: Anything ``check_program`` accepts as its ``ambient`` argument.
AmbientSource = Union[AmbientNamespace, Mapping[str, object], Iterable[str], None]


def coerce_ambient(value: AmbientSource) -> AmbientNamespace:
    """Turn *value* into an ``AmbientNamespace``.

    * ``None`` -> no ambient names
    * ``AmbientNamespace`` -> unchanged
    * ``ChainMap`` -> one namespace per map; ``maps[0]`` is innermost
    * other ``Mapping`` -> its keys
    * iterable of strings -> those names
    """
    if value is None:
        return EMPTY
    if isinstance(value, AmbientNamespace):
        return value
    if isinstance(value, ChainMap):
        namespace: Optional[AmbientNamespace] = None
        depth = len(value.maps)
        for map_ in reversed(value.maps):
            depth -= 1
            namespace = AmbientNamespace(
                f"maps[{depth}]", frozenset(map_), parent=namespace
            )
        return namespace if namespace is not None else EMPTY
    if isinstance(value, Mapping):
        return AmbientNamespace("mapping", frozenset(value))
    if isinstance(value, str):
        raise TypeError("ambient names must be an iterable of names, not a string")
    return AmbientNamespace("names", frozenset(value))


def load_globals_file(path: Union[str, Path]) -> FrozenSet[str]:
    """Read extra ambient names from *path*.

    Accepted formats:
      * a JSON list of names
      * a JSON object; its keys are the names (values are ignored, as in
        the ``globals`` section of a ``.jshintrc``)
      * plain text, one name per line, ``#`` starting a comment
    """
    p = Path(path)
    text = p.read_text(encoding="utf-8")
    stripped = text.lstrip()
    if stripped.startswith(("[", "{")):
        data = json.loads(text)
        # A leading "[" or "{" always decodes to a list or an object
        names = frozenset(str(item) for item in data)
    else:
        collected = set()
        for line in text.splitlines():
            line = line.split("#", 1)[0].strip()
            if line:
                collected.add(line)
        names = frozenset(collected)
    logger.debug("Loaded %d ambient name(s) from %s", len(names), p)
    return names
