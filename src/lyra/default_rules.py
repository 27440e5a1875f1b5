"""
Built-in rule table.

Used whenever lyra-config.yaml does not define its own ``categories``. The
table is the same dict format operators write in YAML, so it goes through
exactly the same compile path (RuleTable.from_dicts).

Weights are tuned against a confidence floor of 3: a single strong cue
(explicit verb + object) reaches it on its own, weak cues need company.
"""

from typing import Any, Dict, List

from lyra.rules import RuleTable

# Verbs that start something new. "make sure" is a figure of speech, not a build.
BUILD_VERBS = r"\b(?:build|create|scaffold|bootstrap|spin up|make(?! sure))\b"

PROJECT_NOUNS = (
    r"\b(?:app|application|website|web app|site|dashboard|api|backend|service|"
    r"tool|cli|game|platform|saas|bot|extension|plugin|landing page|mvp|"
    r"prototype|portal)\b"
)

BUG_TERMS = [
    r"bugs?",
    r"crash(?:es|ed|ing)?",
    r"errors?",
    r"exceptions?",
    r"traceback",
    r"stack ?trace",
    r"broken",
    r"not working",
    r"doesn'?t work",
    r"fail(?:s|ed|ing|ure)?",
    r"regression",
    r"hang(?:s|ing)?",
    r"freez(?:e|es|ing)",
    r"segfault",
    r"500",
]

VULNERABILITY_TERMS = [
    r"vulnerab(?:le|ility|ilities)",
    r"(?:sql |command )?injection",
    r"xss",
    r"csrf",
    r"ssrf",
    r"exploit(?:s|able)?",
    r"owasp",
    r"cve",
    r"(?:leaked|exposed) (?:keys?|secrets?|credentials|tokens?)",
    r"privilege escalation",
    r"auth(?:entication)? bypass",
    r"insecure",
]

CLEANUP_TERMS = [
    r"clean ?up",
    r"dead code",
    r"unused (?:code|imports|functions|files|variables)",
    r"deduplicate",
    r"duplicated? code",
    r"simplify",
    r"restructure",
    r"reorganize",
    r"tech(?:nical)? debt",
]

DEFAULT_CATEGORIES: List[Dict[str, Any]] = [
    {
        "id": "new-project",
        "route": "/gsd:new-project",
        "description": "Start a brand-new project, app or site from scratch",
        "examples": [
            "build a dashboard for tracking expenses",
            "create a landing page for my bakery",
            "start a new project for a recipe sharing app",
        ],
        "redirect_when_managed": "plan-phase",
        "rules": [
            {"name": "build_verb", "regex": BUILD_VERBS, "weight": 1, "negatable": True},
            {
                "name": "build_with_project_noun",
                "regex": BUILD_VERBS,
                "requires": [PROJECT_NOUNS],
                "weight": 2,
                "negatable": True,
            },
            {
                "name": "fresh_start",
                "regex": r"\b(?:from scratch|new project|greenfield|brand new (?:app|project|site|website))\b",
                "weight": 3,
                "negatable": True,
            },
            {
                "name": "detailed_brief",
                "always": True,
                "min_length": 200,
                "requires": [BUILD_VERBS, PROJECT_NOUNS],
                "weight": 1,
            },
        ],
    },
    {
        "id": "plan-phase",
        "route": "/gsd:plan-phase",
        "description": "Plan the next phase or feature of an existing project",
        "examples": [
            "add support for dark mode to the settings page",
            "plan the next phase of the checkout rework",
            "implement a notification feature for new comments",
        ],
        "rules": [
            {
                "name": "next_phase",
                "regex": r"\b(?:next|new) (?:phase|milestone|iteration|sprint)\b",
                "weight": 3,
                "negatable": True,
            },
            {
                "name": "roadmap",
                "regex": r"\b(?:roadmap|phase plan|plan (?:out )?the (?:next|new) (?:phase|feature|milestone))\b",
                "weight": 3,
                "negatable": True,
            },
            {
                "name": "add_feature",
                "regex": r"\b(?:add|implement|introduce|integrate)\b.{0,40}\b(?:feature|functionality|capability|integration|support for)\b",
                "weight": 3,
                "negatable": True,
            },
            {"name": "phase_word", "regex": r"\b(?:phase|milestone)\b", "weight": 1},
        ],
    },
    {
        "id": "debug",
        "route": "/gsd:debug",
        "description": "Investigate and fix a bug, crash or failing behaviour",
        "examples": [
            "the app crashes on startup and shows an error in the console",
            "fix the bug where the cart total is wrong",
            "debug why the webhook handler times out",
        ],
        "rules": [
            {
                "name": "debug_verb",
                "regex": r"\b(?:debug|troubleshoot|diagnose|investigate)\b",
                "weight": 3,
                "negatable": True,
            },
            {
                "name": "fix_problem",
                "regex": r"\bfix\b.{0,30}\b(?:bugs?|issues?|crash(?:es)?|errors?|problems?|failures?|tests?|build)\b",
                "weight": 3,
                "negatable": True,
            },
            {"name": "bug_term", "terms": BUG_TERMS, "min_count": 1, "weight": 2},
            {"name": "multiple_bug_terms", "terms": BUG_TERMS, "min_count": 2, "weight": 2},
        ],
    },
    {
        "id": "security-review",
        "route": "security-reviewer",
        "description": "Review code or configuration for security problems",
        "examples": [
            "run a security review of the payment service",
            "check the login form for sql injection and xss",
            "audit the auth flow for security issues",
        ],
        "rules": [
            {
                "name": "security_review",
                "regex": r"\b(?:security|penetration|pen) ?(?:review|audit|check|scan|test|assessment|pass)\b|\baudit\b.{0,40}\b(?:security|vulnerab\w*|auth\w*)",
                "weight": 3,
                "negatable": True,
            },
            {"name": "vulnerability_term", "terms": VULNERABILITY_TERMS, "min_count": 1, "weight": 2},
            {"name": "multiple_vulnerability_terms", "terms": VULNERABILITY_TERMS, "min_count": 2, "weight": 1},
            {"name": "security_word", "regex": r"\b(?:security|secure|harden(?:ing)?)\b", "weight": 1, "negatable": True},
        ],
    },
    {
        "id": "code-review",
        "route": "code-reviewer",
        "description": "Review recent changes for quality and correctness",
        "examples": [
            "review the changes on this branch before I merge",
            "give me a code review of the new parser",
        ],
        "rules": [
            {
                "name": "review_code",
                "regex": r"\b(?:review|critique|look over|go over)\b.{0,30}\b(?:code|pr|pull request|diff|changes|commits?|implementation|branch)\b",
                "weight": 3,
                "negatable": True,
            },
            {"name": "code_review", "phrase": "code review", "weight": 3, "negatable": True},
            {"name": "quality_word", "regex": r"\b(?:best practices|code quality|code smells?)\b", "weight": 1},
        ],
    },
    {
        "id": "refactor",
        "route": "refactor-cleaner",
        "description": "Restructure or clean up existing code without changing behaviour",
        "examples": [
            "refactor the order service into smaller modules",
            "clean up the dead code and unused imports in utils",
        ],
        "rules": [
            {"name": "refactor_verb", "regex": r"\brefactor(?:ing|ed|s)?\b", "weight": 3, "negatable": True},
            {"name": "cleanup_term", "terms": CLEANUP_TERMS, "min_count": 1, "weight": 2, "negatable": True},
            {"name": "multiple_cleanup_terms", "terms": CLEANUP_TERMS, "min_count": 2, "weight": 1},
        ],
    },
    {
        "id": "write-tests",
        "route": "tdd-guide",
        "description": "Write or extend automated tests",
        "examples": [
            "write unit tests for the invoice calculator",
            "add regression tests for the checkout flow",
            "use tdd to build the rate limiter",
        ],
        "rules": [
            {
                "name": "write_tests",
                "regex": r"\b(?:write|add|create|generate|increase|improve)\b.{0,25}\b(?:tests?|test cases|specs|coverage)\b",
                "weight": 3,
                "negatable": True,
            },
            {"name": "tdd", "regex": r"\b(?:tdd|test[- ]driven|test coverage)\b", "weight": 3, "negatable": True},
            {"name": "test_word", "regex": r"\b(?:tests?|testing|pytest|jest|vitest|playwright)\b", "weight": 1},
        ],
    },
]


def default_rule_table() -> RuleTable:
    """Compile the built-in rule table."""
    return RuleTable.from_dicts(DEFAULT_CATEGORIES)
