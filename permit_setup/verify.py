"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Permit Setup, a product of Garudex Labs

Read-back verification of remote policy state.

The reconciler lists every entity collection, never mutates anything, and
lints user-set conditions client-side: a user set is expected to match on
``user.<scope>`` (attributes passed at check time), and one that references
``subject.<scope>`` is flagged as misconfigured.
"""

from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Optional, Tuple

from rich.console import Console
from rich.table import Table

from permit_setup.admin import PolicyAdmin
from permit_setup.flow.theme import FLOW_THEME
from permit_setup.logging_config import get_logger
from permit_setup.models import ConditionSet, ConditionSetType

logger = get_logger(__name__)

DEFAULT_LINT_SCOPE = "groups"


@dataclass
class ReportSection:
    """One entity class in the report: ``(key, name)`` rows or a listing error."""

    title: str
    items: List[Tuple[str, str]] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class UserSetLint:
    key: str
    uses_user_scope: bool
    uses_subject_scope: bool

    @property
    def misconfigured(self) -> bool:
        return self.uses_subject_scope


@dataclass
class VerificationReport:
    roles: ReportSection
    resources: ReportSection
    user_sets: ReportSection
    resource_sets: ReportSection
    set_rules: ReportSection
    lint: List[UserSetLint] = field(default_factory=list)
    lint_scope: str = DEFAULT_LINT_SCOPE

    @property
    def sections(self) -> List[ReportSection]:
        return [self.roles, self.resources, self.user_sets, self.resource_sets, self.set_rules]

    @property
    def set_rule_count(self) -> Optional[int]:
        return len(self.set_rules.items) if self.set_rules.ok else None

    @property
    def misconfigured_user_sets(self) -> List[str]:
        return [entry.key for entry in self.lint if entry.misconfigured]


def lint_user_set(user_set: ConditionSet, scope: str = DEFAULT_LINT_SCOPE) -> UserSetLint:
    """Check which scope prefix a user set's serialized conditions reference."""
    serialized = user_set.serialized_conditions()
    return UserSetLint(
        key=user_set.key,
        uses_user_scope=f"user.{scope}" in serialized,
        uses_subject_scope=f"subject.{scope}" in serialized,
    )


class Reconciler:
    """
    Builds a ``VerificationReport`` from the remote service.

    Each section is gathered independently; an error while listing one
    section is recorded on that section and the rest still run.
    """

    def __init__(self, admin: PolicyAdmin, lint_scope: str = DEFAULT_LINT_SCOPE):
        self.admin = admin
        self.lint_scope = lint_scope

    async def _section(
        self,
        title: str,
        fetch: Callable[[], Awaitable[List[Tuple[str, str]]]],
    ) -> ReportSection:
        try:
            return ReportSection(title=title, items=await fetch())
        except Exception as e:
            logger.warning("verify_section_failed", section=title, error=str(e))
            return ReportSection(title=title, error=f"Could not list {title.lower()}")

    async def verify(self) -> VerificationReport:
        logger.info("verify_started")

        roles = await self._section(
            "Roles", lambda: self._pairs(self.admin.roles.list())
        )
        resources = await self._section(
            "Resources", lambda: self._pairs(self.admin.resources.list())
        )

        cache: Dict[str, List[ConditionSet]] = {}

        async def fetch_sets(set_type: ConditionSetType) -> List[Tuple[str, str]]:
            if "condition_sets" not in cache:
                cache["condition_sets"] = await self.admin.condition_sets.list()
            return [(cs.key, cs.name) for cs in cache["condition_sets"] if cs.type is set_type]

        user_sets = await self._section(
            "User Sets", lambda: fetch_sets(ConditionSetType.USER_SET)
        )
        resource_sets = await self._section(
            "Resource Sets", lambda: fetch_sets(ConditionSetType.RESOURCE_SET)
        )

        async def fetch_rules() -> List[Tuple[str, str]]:
            return [(rule.user_set, rule.permission) for rule in await self.admin.set_rules.list()]

        set_rules = await self._section("Set Rules", fetch_rules)

        lint = [
            lint_user_set(cs, self.lint_scope)
            for cs in cache.get("condition_sets", [])
            if cs.type is ConditionSetType.USER_SET
        ]

        report = VerificationReport(
            roles=roles,
            resources=resources,
            user_sets=user_sets,
            resource_sets=resource_sets,
            set_rules=set_rules,
            lint=lint,
            lint_scope=self.lint_scope,
        )
        logger.info(
            "verify_completed",
            failed_sections=[s.title for s in report.sections if not s.ok],
            misconfigured_user_sets=report.misconfigured_user_sets,
        )
        return report

    @staticmethod
    async def _pairs(listing: Awaitable[list]) -> List[Tuple[str, str]]:
        return [(item.key, item.name) for item in await listing]


def render_report(report: VerificationReport, console: Optional[Console] = None) -> None:
    """Print the report as rich tables followed by the scope lint verdict."""
    console = console or Console(theme=FLOW_THEME)

    for section in report.sections:
        console.print()
        if not section.ok:
            console.print(f"  [warning]⚠ {section.error}[/]")
            continue
        if section is report.set_rules:
            console.print(f"  [info]{section.title}[/] (total: {report.set_rule_count})")
            for user_set, permission in section.items:
                console.print(f"    - {user_set} -> {permission}")
            continue
        if not section.items:
            console.print(f"  [warning]⚠ No {section.title.lower()} found[/]")
            continue

        table = Table(title=section.title, title_justify="left", show_lines=False)
        table.add_column("Key", style="bold")
        table.add_column("Name")
        if section is report.user_sets:
            table.add_column("Scope")
            lint_by_key = {entry.key: entry for entry in report.lint}
            for key, name in section.items:
                entry = lint_by_key.get(key)
                if entry is not None and entry.misconfigured:
                    scope = f"[error]subject.{report.lint_scope} - WRONG![/]"
                elif entry is not None and entry.uses_user_scope:
                    scope = f"[success]user.{report.lint_scope}[/]"
                else:
                    scope = "[muted]-[/]"
                table.add_row(key, name, scope)
        else:
            for key, name in section.items:
                table.add_row(key, name)
        console.print(table)

    console.print()
    misconfigured = report.misconfigured_user_sets
    if misconfigured:
        console.print(
            f"  [warning]⚠ Some user sets use subject.{report.lint_scope} "
            f"instead of user.{report.lint_scope}:[/]"
        )
        for key in misconfigured:
            console.print(f"    - {key}")
    elif report.lint:
        console.print(
            f"  [success]✓ All user sets use the correct user.{report.lint_scope} condition[/]"
        )
    console.print("  [success]✓ Setup verification complete[/]")
