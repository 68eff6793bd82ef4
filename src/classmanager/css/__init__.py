from classmanager.css.minifier import minify_css
from classmanager.css.model import AtRule, Declaration, RootBlock, Rule, Stylesheet
from classmanager.css.parser import parse_stylesheet
from classmanager.css.serializer import serialize_stylesheet
from classmanager.css.transforms import (
    class_name_feed,
    extract_class_names,
    extract_media_query_classes,
    extract_regular_classes,
    extract_root_variables,
    generate_editor_safe_css,
    remove_root_variables,
)

__all__ = [
    "AtRule",
    "Declaration",
    "RootBlock",
    "Rule",
    "Stylesheet",
    "class_name_feed",
    "extract_class_names",
    "extract_media_query_classes",
    "extract_regular_classes",
    "extract_root_variables",
    "generate_editor_safe_css",
    "minify_css",
    "parse_stylesheet",
    "serialize_stylesheet",
]
