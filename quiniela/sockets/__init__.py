from .live_events import register_live_events
from .admin_events import register_admin_events

def register_sockets(socketio):
    register_live_events(socketio)
    register_admin_events(socketio)
