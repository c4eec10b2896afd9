"""
Project: Smart Restaurant Management System (SRMS)
School: UMGC – Software Development and Security
Authors: Beby Alexis, Kevin Wong, David White Jr
Date: October 2025

Description:
Module-level app object for WSGI servers, e.g.
``gunicorn -k eventlet -w 1 wsgi:app``.
"""

from app import create_app

app = create_app()
socketio = app.extensions["realtime"].socketio
