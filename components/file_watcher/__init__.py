from .file_watcher import ProjectEventHandler, ProjectWatcher

__all__ = ["ProjectEventHandler", "ProjectWatcher"]
