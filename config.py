import os

class Config:
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URI', 'sqlite:///stuff-database.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # "sql" - durable backend, "memory" - transient in-process store
    COMPONENT_STORE = os.getenv('COMPONENT_STORE', 'sql')
    LOG_FILE = os.getenv('LOG_FILE')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
