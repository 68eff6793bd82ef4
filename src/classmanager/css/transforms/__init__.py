from classmanager.css.parser import parse_stylesheet
from classmanager.css.serializer import serialize_node, serialize_root
from classmanager.css.transforms.class_names import class_name_feed, extract_class_names
from classmanager.css.transforms.editor_scope import EditorScopeTransform
from classmanager.css.transforms.root_variables import (
    extract_root_variables,
    remove_root_variables,
)

BUILTIN_TRANSFORMS = [
    EditorScopeTransform(),
]


def apply_transforms(stylesheet, custom_transforms=None):
    """Apply all built-in transforms (and any custom ones) to *stylesheet*."""
    transforms = list(BUILTIN_TRANSFORMS)
    if custom_transforms:
        transforms.extend(custom_transforms)
    for t in transforms:
        stylesheet = t.apply(stylesheet)
    return stylesheet


def extract_regular_classes(css: str) -> str:
    """Editor-scoped copies of the top-level class rules of *css*."""
    scoped = EditorScopeTransform().apply(parse_stylesheet(css))
    return "".join(serialize_node(rule) for rule in scoped.rules)


def extract_media_query_classes(css: str) -> str:
    """Editor-scoped copies of the class rules inside ``@media`` blocks of *css*."""
    scoped = EditorScopeTransform().apply(parse_stylesheet(css))
    return "".join(serialize_node(block) for block in scoped.media_blocks)


def generate_editor_safe_css(css: str) -> str:
    """Root variables, then regular classes, then media query classes."""
    scoped = apply_transforms(parse_stylesheet(css))
    root = scoped.first_root()
    return (
        (serialize_root(root) if root is not None else "")
        + "".join(serialize_node(rule) for rule in scoped.rules)
        + "".join(serialize_node(block) for block in scoped.media_blocks)
    )


__all__ = [
    "BUILTIN_TRANSFORMS",
    "EditorScopeTransform",
    "apply_transforms",
    "class_name_feed",
    "extract_class_names",
    "extract_media_query_classes",
    "extract_regular_classes",
    "extract_root_variables",
    "generate_editor_safe_css",
    "remove_root_variables",
]
