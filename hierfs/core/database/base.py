# File: hierfs/core/database/base.py

from sqlalchemy.orm import declarative_base

# The shared registry. Catalog models (entries) inherit from this.
Base = declarative_base()
