from .content_assembler import render_story, render_series, separator_for, PAGE_RULE
from .template_renderer import fill_template, template_values, TEMPLATE_PLACEHOLDERS

__all__ = [
    "render_story",
    "render_series",
    "separator_for",
    "PAGE_RULE",
    "fill_template",
    "template_values",
    "TEMPLATE_PLACEHOLDERS",
]
