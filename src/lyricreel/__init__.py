"""lyricreel - karaoke lyric videos with live preview and frame-exact export."""

__version__ = "0.1.0"
