"""Interactive stage, commit and sync flow."""

from gitwalk.flow.actions import Action, ActionKind, Outcome, OutcomeKind
from gitwalk.flow.dispatcher import ActionDispatcher, FlowSession
from gitwalk.flow.engine import STATE_MENUS, FlowLoop
from gitwalk.flow.menu import INDEX_KEYS, Menu, MenuEngine, MenuOption
from gitwalk.flow.resolver import UpstreamResolver

__all__ = [
    "Action",
    "ActionKind",
    "Outcome",
    "OutcomeKind",
    "Menu",
    "MenuOption",
    "MenuEngine",
    "INDEX_KEYS",
    "UpstreamResolver",
    "ActionDispatcher",
    "FlowSession",
    "FlowLoop",
    "STATE_MENUS",
]
