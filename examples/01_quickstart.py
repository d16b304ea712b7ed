#!/usr/bin/env python3
"""Example: Quickstart for corral

Register permission rules for a small blog and check them.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install corral-authz
"""
from __future__ import annotations

from dataclasses import dataclass

import corral
from corral import Action


@dataclass
class Role:
    id: int
    name: str

    def subject_key(self) -> str:
        return self.name.lower()


@dataclass
class Post:
    id: int
    profile_id: int
    title: str
    hidden: bool = False

    object_type = "post"


def not_hidden(role: Role, post: Post) -> bool:
    return not post.hidden


def main() -> None:
    print(f"corral version: {corral.__version__}")

    # Step 1: Register rules
    rules = corral.Corral()
    rules.authorize("admin", Post, Action.MANAGE)
    rules.conditional_authorize("user", Post, Action.READ, not_hidden)
    print(f"Registered {len(rules.permissions)} rules")

    # Step 2: Check subjects against posts
    admin = Role(id=1, name="Admin")
    user = Role(id=2, name="User")
    posts = [
        Post(id=1, profile_id=1, title="Post by Administrator"),
        Post(id=3, profile_id=1, title="Hidden Post by Administrator", hidden=True),
    ]

    print("\nChecks:")
    for subject in (admin, user):
        for post in posts:
            for action in (Action.READ, Action.DELETE):
                decision = rules.explain(subject, post, action)
                icon = "ALLOW" if decision.allowed else "DENY"
                print(f"  [{icon}] {subject.name} {action.name.lower()} {post.title!r}")
                print(f"    {decision.reason}")

    # Step 3: Inspect the rule set
    print("\nSummary:", rules.permissions.summary())


if __name__ == "__main__":
    main()
