from models.db_storage import DBStorage

# Engine and tables are bound by api.create_app() via storage.reload()
storage = DBStorage()
