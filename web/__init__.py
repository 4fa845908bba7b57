"""
Web application package for the chess tutor.

Provides the FastAPI REST API the browser front end calls for the computer
opponent's moves and the "best moves" advisor.
"""
