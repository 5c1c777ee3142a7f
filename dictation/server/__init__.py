"""Single-instance toggle server."""
from dictation.server.ToggleServer import ToggleServer, default_socket_path, signal_existing_instance

__all__ = ['ToggleServer', 'default_socket_path', 'signal_existing_instance']
