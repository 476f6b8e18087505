"""Static scene graph validation utilities.

Runs before a session starts so that authoring defects (dangling edges, a
missing start scene) are reported up front instead of surfacing mid-play.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

from nebula.core.types import SceneId
from nebula.domain.defs import SceneDef
from nebula.domain.graph import SceneGraph
from nebula.services.errors import InvalidGraphError


Severity = str


@dataclass(frozen=True, slots=True)
class Issue:
    severity: Severity
    code: str
    message: str
    context: dict[str, str]


@dataclass(frozen=True, slots=True)
class EntryRoot:
    scene_id: SceneId
    source_type: str
    source_id: str
    source_field: str


@dataclass(frozen=True, slots=True)
class SceneInfo:
    scene_id: SceneId
    choice_next_ids: list[SceneId]
    choice_labels: list[str]

    @property
    def is_terminal(self) -> bool:
        return not self.choice_next_ids


def format_issue(issue: Issue) -> str:
    context = " ".join(f"{key}={value}" for key, value in issue.context.items())
    suffix = f" ({context})" if context else ""
    return f"[{issue.severity}] {issue.code}: {issue.message}{suffix}"


def has_errors(issues: Iterable[Issue]) -> bool:
    return any(issue.severity == "ERROR" for issue in issues)


def validate_story_graph(
    scenes: SceneGraph | Mapping[SceneId, SceneDef] | Sequence[SceneDef],
    entry_roots: Sequence[EntryRoot] | Sequence[SceneId],
    *,
    error_on_fallback_cycle: bool = False,
) -> list[Issue]:
    issues: list[Issue] = []
    scene_map, duplicate_ids = _coerce_scenes(scenes)
    for scene_id in duplicate_ids:
        issues.append(
            Issue(
                severity="WARN",
                code="DUPLICATE_SCENE_ID",
                message="Scene id defined more than once; the last definition wins.",
                context={"scene_id": str(scene_id)},
            )
        )
    scene_infos = {scene_id: _build_scene_info(scene) for scene_id, scene in scene_map.items()}
    scene_ids = set(scene_infos.keys())
    entry_root_list = _coerce_entry_roots(entry_roots)

    for entry in entry_root_list:
        if entry.scene_id not in scene_ids:
            issues.append(
                Issue(
                    severity="ERROR",
                    code="MISSING_ENTRY_ROOT",
                    message="Entry root references missing scene.",
                    context={
                        "source_type": entry.source_type,
                        "source_id": entry.source_id,
                        "field_path": entry.source_field,
                        "referenced_id": str(entry.scene_id),
                    },
                )
            )

    for scene_info in scene_infos.values():
        _validate_scene_references(scene_info, scene_ids, issues)
        _warn_on_blank_labels(scene_info, issues)

    if scene_infos and not any(info.is_terminal for info in scene_infos.values()):
        issues.append(
            Issue(
                severity="ERROR",
                code="NO_TERMINAL_SCENE",
                message="Graph has no terminal scene; no session can ever end.",
                context={},
            )
        )

    reachable = _validate_reachability(scene_infos, entry_root_list, issues)
    _validate_endings_reachable(scene_infos, reachable, issues)
    _validate_fallback_cycles(
        scene_infos, entry_root_list, issues, error_on_fallback_cycle=error_on_fallback_cycle
    )
    return issues


def ensure_valid(
    scenes: SceneGraph | Mapping[SceneId, SceneDef] | Sequence[SceneDef],
    entry_roots: Sequence[EntryRoot] | Sequence[SceneId],
) -> list[Issue]:
    """Validate and raise InvalidGraphError on any ERROR; return the warnings otherwise."""
    issues = validate_story_graph(scenes, entry_roots)
    errors = [issue for issue in issues if issue.severity == "ERROR"]
    if errors:
        raise InvalidGraphError(errors)
    return issues


def _coerce_scenes(
    scenes: SceneGraph | Mapping[SceneId, SceneDef] | Sequence[SceneDef],
) -> tuple[dict[SceneId, SceneDef], list[SceneId]]:
    if isinstance(scenes, SceneGraph):
        return {scene.id: scene for scene in scenes.scenes()}, []
    if isinstance(scenes, Mapping):
        return dict(scenes), []
    scene_map: dict[SceneId, SceneDef] = {}
    duplicates: list[SceneId] = []
    for scene in scenes:
        if scene.id in scene_map:
            duplicates.append(scene.id)
        scene_map[scene.id] = scene
    return scene_map, duplicates


def _coerce_entry_roots(entry_roots: Sequence[EntryRoot] | Sequence[SceneId]) -> list[EntryRoot]:
    roots: list[EntryRoot] = []
    for entry in entry_roots:
        if isinstance(entry, EntryRoot):
            roots.append(entry)
        else:
            roots.append(
                EntryRoot(
                    scene_id=entry,
                    source_type="unknown",
                    source_id="unknown",
                    source_field="entry_roots",
                )
            )
    return roots


def _build_scene_info(scene: SceneDef) -> SceneInfo:
    return SceneInfo(
        scene_id=scene.id,
        choice_next_ids=[choice.next_scene_id for choice in scene.choices],
        choice_labels=[choice.label for choice in scene.choices],
    )


def _validate_scene_references(
    scene_info: SceneInfo, scene_ids: set[SceneId], issues: list[Issue]
) -> None:
    for index, next_id in enumerate(scene_info.choice_next_ids):
        if next_id not in scene_ids:
            issues.append(
                Issue(
                    severity="ERROR",
                    code="MISSING_SCENE_REF",
                    message="Choice references missing scene.",
                    context={
                        "scene_id": str(scene_info.scene_id),
                        "field_path": f"choices[{index}].next",
                        "referenced_id": str(next_id),
                    },
                )
            )


def _warn_on_blank_labels(scene_info: SceneInfo, issues: list[Issue]) -> None:
    for index, label in enumerate(scene_info.choice_labels):
        if label.strip():
            continue
        issues.append(
            Issue(
                severity="WARN",
                code="EMPTY_CHOICE_LABEL",
                message="Choice label is blank.",
                context={
                    "scene_id": str(scene_info.scene_id),
                    "field_path": f"choices[{index}].label",
                },
            )
        )


def _validate_reachability(
    scene_infos: Mapping[SceneId, SceneInfo],
    entry_roots: Sequence[EntryRoot],
    issues: list[Issue],
) -> set[SceneId]:
    scene_ids = set(scene_infos.keys())
    reachable: set[SceneId] = set()
    stack: list[SceneId] = [entry.scene_id for entry in entry_roots if entry.scene_id in scene_ids]
    while stack:
        scene_id = stack.pop()
        if scene_id in reachable:
            continue
        reachable.add(scene_id)
        for next_id in scene_infos[scene_id].choice_next_ids:
            if next_id in scene_ids:
                stack.append(next_id)
    for scene_id in sorted(scene_ids - reachable):
        issues.append(
            Issue(
                severity="WARN",
                code="UNREACHABLE_SCENE",
                message="Scene is unreachable from the story roots.",
                context={"scene_id": str(scene_id)},
            )
        )
    return reachable


def _validate_endings_reachable(
    scene_infos: Mapping[SceneId, SceneInfo],
    reachable: set[SceneId],
    issues: list[Issue],
) -> None:
    terminals = [scene_id for scene_id, info in scene_infos.items() if info.is_terminal]
    if not terminals:
        return
    predecessors: dict[SceneId, list[SceneId]] = {scene_id: [] for scene_id in scene_infos}
    for scene_id, info in scene_infos.items():
        for next_id in info.choice_next_ids:
            if next_id in predecessors:
                predecessors[next_id].append(scene_id)

    can_end: set[SceneId] = set()
    queue: deque[SceneId] = deque(terminals)
    while queue:
        scene_id = queue.popleft()
        if scene_id in can_end:
            continue
        can_end.add(scene_id)
        queue.extend(predecessors[scene_id])

    for scene_id in sorted(reachable - can_end):
        issues.append(
            Issue(
                severity="WARN",
                code="NO_ENDING_REACHABLE",
                message="No terminal scene can be reached from this scene.",
                context={"scene_id": str(scene_id)},
            )
        )


def _validate_fallback_cycles(
    scene_infos: Mapping[SceneId, SceneInfo],
    entry_roots: Sequence[EntryRoot],
    issues: list[Issue],
    *,
    error_on_fallback_cycle: bool,
) -> None:
    """Follow the first choice from each root, as a closed input stream would."""
    seen_cycles: set[frozenset[SceneId]] = set()
    cycles: list[list[SceneId]] = []
    for entry in entry_roots:
        path: list[SceneId] = []
        position: dict[SceneId, int] = {}
        current = entry.scene_id
        while current in scene_infos and current not in position:
            info = scene_infos[current]
            if info.is_terminal:
                break
            position[current] = len(path)
            path.append(current)
            current = info.choice_next_ids[0]
        if current not in position:
            continue
        cycle = path[position[current] :]
        key = frozenset(cycle)
        if key in seen_cycles:
            continue
        seen_cycles.add(key)
        cycles.append(cycle)

    severity = "ERROR" if error_on_fallback_cycle else "WARN"
    for cycle in cycles:
        cycle_path = " -> ".join(str(scene_id) for scene_id in cycle + [cycle[0]])
        issues.append(
            Issue(
                severity=severity,
                code="FALLBACK_CYCLE",
                message="Always taking option 1 loops forever without reaching an ending.",
                context={"cycle": cycle_path},
            )
        )
