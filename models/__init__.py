"""Persistence layer: SQLAlchemy models and the shared DBStorage instance.

``storage`` is bound to a database by the application factory
(``storage.configure(url)`` then ``storage.reload()``).
"""
from models.db_storage import DBStorage

storage = DBStorage()
