"""
EditorLib - Interactive blur zone editing

This module provides the editor state machine, editor settings and the
PyQt5 editor window.
"""

from BZ_Libs.EditorLib.editor_settings import (
    EditorSettings,
    SettingsProvider,
    load_settings,
    save_settings,
)
from BZ_Libs.EditorLib.editor_controller import (
    BlurEditorController,
    ZonePersistence,
)

__all__ = [
    "EditorSettings",
    "SettingsProvider",
    "load_settings",
    "save_settings",
    "BlurEditorController",
    "ZonePersistence",
]
