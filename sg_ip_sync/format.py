import dataclasses
from datetime import datetime
from enum import Enum

import simplejson


class ModelEncoder(simplejson.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, datetime):
            return obj.isoformat()
        elif isinstance(obj, Enum):
            return obj.value
        elif isinstance(obj, set):
            return list(obj)
        elif dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            return dataclasses.asdict(obj)
        return simplejson.JSONEncoder.default(self, obj)


def loads(*args, **kwargs):
    return simplejson.loads(*args, **kwargs)


def dumps(*args, **kwargs):
    kwargs["cls"] = kwargs.get("cls", ModelEncoder)
    return simplejson.dumps(*args, **kwargs)
