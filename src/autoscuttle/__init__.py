"""
autoscuttle: keeps scuttling until the game lands on the wanted server.
"""

__version__ = "0.1.0"
