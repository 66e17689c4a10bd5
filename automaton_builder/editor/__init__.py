"""Editing facade composing the entity model, history and layout."""

from .engine import EditorEngine

__all__ = ["EditorEngine"]
