"""
Stack detection from manifest files.

Purely informational: the labels end up in the context hook output and
never influence routing.
"""

import json
import logging
from pathlib import Path
from typing import List, Tuple

logger = logging.getLogger(__name__)

# (dependency name, label); several packages may share a label
PACKAGE_LABELS: List[Tuple[str, str]] = [
    # Frontend frameworks
    ("react", "React"), ("next", "Next.js"), ("vue", "Vue"),
    ("svelte", "Svelte"), ("angular", "Angular"), ("solid-js", "SolidJS"),
    ("astro", "Astro"), ("remix", "Remix"), ("nuxt", "Nuxt"),
    # Mobile
    ("expo", "Expo"), ("react-native", "React Native"),
    # Backend frameworks
    ("express", "Express"), ("fastify", "Fastify"), ("hono", "Hono"),
    ("@nestjs/core", "NestJS"), ("koa", "Koa"),
    # Databases & ORMs
    ("@supabase/supabase-js", "Supabase"), ("firebase", "Firebase"),
    ("prisma", "Prisma"), ("@prisma/client", "Prisma"),
    ("drizzle-orm", "Drizzle"), ("mongoose", "MongoDB"),
    ("pg", "PostgreSQL"), ("mysql2", "MySQL"), ("redis", "Redis"),
    # API
    ("graphql", "GraphQL"), ("@trpc/server", "tRPC"), ("trpc", "tRPC"),
    # State & data fetching
    ("@tanstack/react-query", "TanStack Query"), ("zustand", "Zustand"),
    # Styling
    ("tailwindcss", "Tailwind"),
    # Testing
    ("vitest", "Vitest"), ("jest", "Jest"), ("@playwright/test", "Playwright"),
    # Language
    ("typescript", "TypeScript"),
    # Realtime
    ("socket.io", "Socket.IO"), ("ws", "WebSocket"),
    # 3D / Game
    ("three", "Three.js"), ("@dimforge/rapier3d-compat", "Rapier3D"),
    ("babylonjs", "Babylon.js"), ("phaser", "Phaser"),
    # AI
    ("@anthropic-ai/sdk", "Anthropic SDK"), ("openai", "OpenAI SDK"),
    ("@google/generative-ai", "Gemini AI"),
]

# Label -> any of these files marks the language
LANGUAGE_MARKERS: List[Tuple[str, Tuple[str, ...]]] = [
    ("Python", ("requirements.txt", "pyproject.toml")),
    ("Go", ("go.mod",)),
    ("Rust", ("Cargo.toml",)),
    ("Java/Kotlin", ("pom.xml", "build.gradle")),
]


def detect_package_stack(cwd: Path) -> List[str]:
    """Labels for known dependencies in package.json, deduplicated in order."""
    pkg_path = cwd / "package.json"
    if not pkg_path.is_file():
        return []

    try:
        pkg = json.loads(pkg_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.debug(f"Skipping unreadable package.json: {e}")
        return []
    if not isinstance(pkg, dict):
        return []

    deps = {}
    for key in ("dependencies", "devDependencies"):
        section = pkg.get(key)
        if isinstance(section, dict):
            deps.update(section)

    labels: List[str] = []
    for dep, label in PACKAGE_LABELS:
        if deps.get(dep) and label not in labels:
            labels.append(label)
    return labels


def detect_languages(cwd: Path) -> List[str]:
    """Language labels for non-JavaScript manifests present in cwd."""
    return [
        label
        for label, markers in LANGUAGE_MARKERS
        if any((cwd / marker).exists() for marker in markers)
    ]


def detect_stack(cwd: Path) -> List[str]:
    """All stack labels for cwd: package.json labels then languages."""
    return detect_package_stack(cwd) + detect_languages(cwd)
