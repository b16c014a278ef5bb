"""Elements Layer - Reference arena and element wrappers."""

from framescope.layers.elements.arena import ReferenceArena, ReferenceNode
from framescope.layers.elements.references import (
    ElementCollection,
    ElementReference,
    SelectBy,
    SeleniumWrapper,
    WrapperKind,
)

__all__ = [
    "ReferenceArena",
    "ReferenceNode",
    "ElementCollection",
    "ElementReference",
    "SelectBy",
    "SeleniumWrapper",
    "WrapperKind",
]
