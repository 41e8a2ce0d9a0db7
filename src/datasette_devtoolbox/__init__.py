"""Datasette plugin for a browsable developer tool directory with AI recommendations."""

from datasette_devtoolbox.plugin import (
    extra_template_vars,
    prepare_jinja2_environment,
    register_routes,
    skip_csrf,
    startup,
)

__all__ = [
    "extra_template_vars",
    "prepare_jinja2_environment",
    "register_routes",
    "skip_csrf",
    "startup",
]
