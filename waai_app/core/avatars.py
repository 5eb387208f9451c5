"""Fixed, process-wide catalog of selectable child avatars."""

from __future__ import annotations

from waai_app.core.models import Avatar

_AVATAR_BASE_URL = "https://api.dicebear.com/7.x/adventurer/svg?seed="

AVATARS: tuple[Avatar, ...] = (
    Avatar("cat_avatar_01", f"{_AVATAR_BASE_URL}Felix", "Cute Cat"),
    Avatar("dog_avatar_02", f"{_AVATAR_BASE_URL}Buddy", "Friendly Dog"),
    Avatar("rabbit_avatar_03", f"{_AVATAR_BASE_URL}Hopper", "Happy Rabbit"),
    Avatar("fox_avatar_04", f"{_AVATAR_BASE_URL}Rusty", "Swift Fox"),
    Avatar("owl_avatar_05", f"{_AVATAR_BASE_URL}Sage", "Wise Owl"),
    Avatar("panda_avatar_06", f"{_AVATAR_BASE_URL}Bamboo", "Playful Panda"),
)

_AVATARS_BY_ID = {avatar.id: avatar for avatar in AVATARS}


def get_avatar(avatar_id: str) -> Avatar | None:
    return _AVATARS_BY_ID.get(avatar_id)


def list_avatars() -> list[Avatar]:
    return list(AVATARS)
