"""QAction construction for the popup commands."""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import QMenu, QWidget

from pretty_ts_errors.core.keybindings import (
    KEYMAP_ACTIONS,
    find_conflicts,
    get_action_sequence,
    sequence_to_text,
)

_LOGGER = logging.getLogger("PrettyTsErrors.Actions")


def qkeysequence_from_sequence(sequence: list[str] | tuple[str, ...]) -> QKeySequence:
    return QKeySequence(sequence_to_text(list(sequence)))


class ActionRegistry:
    @staticmethod
    def apply_keymaps(actions: Mapping[str, QAction], keymaps: Mapping[str, Any] | None) -> None:
        for conflict in find_conflicts(keymaps):
            _LOGGER.warning(
                "Shortcut %s for %r is already bound to another command",
                conflict.sequence_text,
                conflict.action_name,
            )
        for action_id, action in actions.items():
            sequence = get_action_sequence(keymaps, action_id)
            if not sequence:
                action.setShortcut("")
                continue
            action.setShortcut(qkeysequence_from_sequence(sequence))

    @staticmethod
    def create_actions(
        owner: QWidget,
        handlers: Mapping[str, Callable[[], Any]],
        keymaps: Mapping[str, Any] | None,
        *,
        menu: QMenu | None = None,
    ) -> dict[str, QAction]:
        """Build one action per known command id that has a handler."""
        actions: dict[str, QAction] = {}
        for definition in KEYMAP_ACTIONS:
            handler = handlers.get(definition.action_id)
            if handler is None:
                continue
            action = QAction(definition.action_name, owner)
            action.setShortcutContext(Qt.WindowShortcut)
            action.triggered.connect(lambda _checked=False, fn=handler: fn())
            owner.addAction(action)
            if menu is not None:
                menu.addAction(action)
            actions[definition.action_id] = action

        if "toggle" in actions:
            actions["toggle"].setCheckable(True)
        ActionRegistry.apply_keymaps(actions, keymaps)
        return actions
