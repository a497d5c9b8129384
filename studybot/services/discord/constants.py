"""Discord interaction and component enums"""
from enum import IntEnum


class InteractionType(IntEnum):
    PING = 1
    APPLICATION_COMMAND = 2
    MESSAGE_COMPONENT = 3


class InteractionResponseType(IntEnum):
    PONG = 1
    CHANNEL_MESSAGE_WITH_SOURCE = 4
    UPDATE_MESSAGE = 7


class InteractionResponseFlags(IntEnum):
    EPHEMERAL = 1 << 6


class MessageComponentType(IntEnum):
    ACTION_ROW = 1
    BUTTON = 2


class ButtonStyle(IntEnum):
    PRIMARY = 1
    SECONDARY = 2
    SUCCESS = 3
    DANGER = 4


class CommandOptionType(IntEnum):
    STRING = 3


def button(custom_id: str, label: str, style: ButtonStyle) -> dict:
    return {
        "type": MessageComponentType.BUTTON,
        "custom_id": custom_id,
        "label": label,
        "style": style,
    }


def action_row(*components: dict) -> dict:
    return {
        "type": MessageComponentType.ACTION_ROW,
        "components": list(components),
    }
