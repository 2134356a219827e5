"""
This __init__.py file makes detakit a Python package and exposes the
`Deta` entry point together with the Base, Drive, Query and Updater clients.
"""

from .base import Base
from .deta import Deta
from .drive import Drive
from .querydsl import Comparator, Query, WalkErrorPolicy
from .schema import FileList, Paging, QueryResult, Record, UploadSession
from .updater import Updater
from .uploader import ChunkUploader

__version__ = "0.1.0"

__all__ = [
    "Deta",
    "Base",
    "Drive",
    "Query",
    "Comparator",
    "WalkErrorPolicy",
    "Updater",
    "ChunkUploader",
    "Record",
    "Paging",
    "QueryResult",
    "FileList",
    "UploadSession",
]
