from datetime import datetime
from enum import Enum

from bson import ObjectId


def serialize_mongo(obj):
    """
    Recursively convert Mongo documents (ObjectId, datetime, enums,
    tuples) into JSON-safe values.
    """
    if isinstance(obj, ObjectId):
        return str(obj)

    if isinstance(obj, datetime):
        return obj.isoformat()

    if isinstance(obj, Enum):
        return obj.value

    if isinstance(obj, (list, tuple, set)):
        return [serialize_mongo(i) for i in obj]

    if isinstance(obj, dict):
        return {k: serialize_mongo(v) for k, v in obj.items() if k != "password_hash"}

    return obj
