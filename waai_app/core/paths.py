"""Key-tree path convention used with the persistence gateway."""

from __future__ import annotations


def teacher_root(teacher_id: str) -> str:
    return f"teachers/{teacher_id}"


def teacher_profile_path(teacher_id: str) -> str:
    return f"{teacher_root(teacher_id)}/profile"


def teacher_security_path(teacher_id: str) -> str:
    return f"{teacher_root(teacher_id)}/security"


def children_path(teacher_id: str) -> str:
    return f"{teacher_root(teacher_id)}/children"


def child_path(teacher_id: str, child_id: str) -> str:
    return f"{children_path(teacher_id)}/{child_id}"


def activities_path(teacher_id: str) -> str:
    return f"{teacher_root(teacher_id)}/activities"


def activity_path(teacher_id: str, activity_id: str) -> str:
    return f"{activities_path(teacher_id)}/{activity_id}"


def progress_path(teacher_id: str, child_id: str, activity_id: str | None = None) -> str:
    """Progress of one child, either for every activity or for a single one."""
    base = f"{child_path(teacher_id, child_id)}/progress"
    if activity_id is None:
        return base
    return f"{base}/{activity_id}"


def answer_path(teacher_id: str, child_id: str, activity_id: str, question_id: str) -> str:
    return f"{progress_path(teacher_id, child_id, activity_id)}/answers/{question_id}"


def split_path(path: str) -> list[str]:
    """Split a slash-separated path into its non-empty keys."""
    return [segment for segment in path.strip("/").split("/") if segment]
