"""Address book application package root.

Flask web application: login gate, navigation tree, master/detail contact
views and search over the SQL-backed person table. The Flask app object is
built by :func:`addressbook.startup.wiring.create_app`.
"""

__all__ = [
]
