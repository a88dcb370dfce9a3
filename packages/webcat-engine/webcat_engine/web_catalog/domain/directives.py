"""
Post-processor directives

Immutable descriptions of the corrective transforms applied to an interim
catalog. Each directive is a tagged variant (``kind``) so pipelines can be
loaded from YAML/JSON and interpreted by a small dispatcher.

URL fields are an audit trail only; they never change behaviour.
"""

from __future__ import annotations

import re
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class DirectiveBase(BaseModel):
    """Fields shared by every directive."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    confluence_issue_url: str = ""
    """Tracking issue for the correction"""

    browser_bug_url: str = ""
    """Upstream browser bug that makes the correction necessary"""

    spec_url: str = ""
    """Specification text backing the correction"""

    other_urls: tuple[str, ...] = ()


class CopyToPrototypeDirective(DirectiveBase):
    """
    Copy every member of ``from_interface_name`` into target interfaces.

    Without explicit targets, the targets are the class names of the source
    object's prototype in the graph (e.g. ``window`` -> ``Window``).
    """

    kind: Literal["copy"] = "copy"
    from_interface_name: str
    to_interface_names: tuple[str, ...] | None = None


class RemoveInterfacesDirective(DirectiveBase):
    """Delete interfaces by exact name."""

    kind: Literal["remove-interfaces"] = "remove-interfaces"
    interface_names: tuple[str, ...] = ()


class RemoveApisDirective(DirectiveBase):
    """Delete members matching ``api_name_pattern`` from the named interfaces only."""

    kind: Literal["remove-apis"] = "remove-apis"
    interface_names: tuple[str, ...] = ()
    api_name_pattern: str

    @field_validator("api_name_pattern")
    @classmethod
    def _compiles(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"invalid api_name_pattern {value!r}: {e}") from e
        return value

    @property
    def api_name_regex(self) -> re.Pattern[str]:
        return re.compile(self.api_name_pattern)


class AddApisDirective(DirectiveBase):
    """Insert a fixed list of members into an interface (created if absent)."""

    kind: Literal["add"] = "add"
    interface_name: str
    api_names: tuple[str, ...] = ()


PostProcessorDirective = Annotated[
    Union[
        CopyToPrototypeDirective,
        RemoveInterfacesDirective,
        RemoveApisDirective,
        AddApisDirective,
    ],
    Field(discriminator="kind"),
]

# Pipeline phase of each kind: copy before remove before add.
DIRECTIVE_PHASES: dict[str, int] = {
    "copy": 0,
    "remove-interfaces": 1,
    "remove-apis": 1,
    "add": 2,
}


def default_post_processors() -> tuple[PostProcessorDirective, ...]:
    """Corrections known to be needed for real browser snapshots."""
    return (
        # Copy data around before (potentially) removing data that should be copied.
        CopyToPrototypeDirective(
            from_interface_name="CSS2Properties",
            confluence_issue_url="https://github.com/GoogleChrome/confluence/issues/78",
            browser_bug_url="https://bugzilla.mozilla.org/show_bug.cgi?id=1290786",
        ),
        # Members of the global "window" object belong on "Window".
        CopyToPrototypeDirective(from_interface_name="window"),
        RemoveApisDirective(
            interface_names=("CSSStyleDeclaration",),
            api_name_pattern="[-]",
            spec_url="https://drafts.csswg.org/cssom/#dom-cssstyledeclaration-dashed-attribute",
            other_urls=(
                "https://github.com/GoogleChrome/confluence/issues/174",
                "https://github.com/w3c/csswg-drafts/issues/1089",
            ),
        ),
    )
