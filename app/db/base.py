# app/db/base.py
from sqlalchemy.orm import declarative_base

# Single declarative Base so create_all sees every table
Base = declarative_base()
