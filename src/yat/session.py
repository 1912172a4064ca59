"""
Session - owns a task tree together with its navigation state.

Adapters read ``view()`` snapshots and change state only through
``dispatch()``.
"""
from typing import List, Optional

from .codec import encode
from .data import SaveStore
from .dispatch import Command, Dispatcher, DispatchResult
from .models import TaskTree
from .navigation import Navigation
from .recovery import CorruptionError, YatError
from .view import SessionView, build_view
from .logs import get_logger

log = get_logger("session")

class Session:
    """The single owner of a (TaskTree, Navigation) pair."""

    def __init__(self, tree: Optional[TaskTree] = None, store: Optional[SaveStore] = None,
                 autosave: bool = True, navigation: Optional[Navigation] = None):
        self.tree = tree if tree is not None else TaskTree()
        self.navigation = navigation if navigation is not None else Navigation.for_tree(self.tree)
        self.store = store
        self.autosave = autosave
        # Problems found while loading, for the adapter to surface
        self.load_errors: List[YatError] = []
        self.dispatcher = Dispatcher(self)

    @classmethod
    def open(cls, store: SaveStore, autosave: bool = True) -> 'Session':
        """
        Load a session from a save store, best effort.

        Malformed lines are dropped and kept in ``load_errors``; an unreadable
        encoding starts an empty list. Either way the store backs up the
        original file before it is overwritten.

        Raises:
            FileOperationError: if the save file exists but cannot be read.
        """
        try:
            result = store.load()
        except CorruptionError as e:
            log.error(f"Unable to parse save file {store.path}: {e}")
            session = cls(store=store, autosave=autosave)
            session.load_errors.append(e)
            return session

        session = cls(tree=result.tree, store=store, autosave=autosave)
        session.load_errors.extend(result.errors)
        return session

    def dispatch(self, command: Command) -> DispatchResult:
        return self.dispatcher.dispatch(command)

    def view(self) -> SessionView:
        return build_view(self.tree, self.navigation)

    def save(self) -> bytes:
        """Write the tree to the store, or just encode it if there is none."""
        if self.store is None:
            log.warning("Session has no save file; nothing written")
            return encode(self.tree)
        return self.store.save(self.tree)
