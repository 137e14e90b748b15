"""Prompt text sent for embedding."""

from __future__ import annotations

from ..models import TestCase


def _render_steps(steps: str | list) -> str:
    if isinstance(steps, list):
        return "\n".join(str(step) for step in steps)
    return steps


def build_prompt(testcase: TestCase) -> str:
    lines = [
        f"ID: {testcase.id}",
        f"Module: {testcase.module}",
        f"Title: {testcase.title}",
        f"Description: {testcase.description}",
        f"Steps: {_render_steps(testcase.steps)}",
        f"Expected Result: {testcase.expected_results}",
    ]
    return "\n".join(lines)
