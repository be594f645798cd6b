from enum import Enum
from fnmatch import fnmatchcase
from functools import lru_cache
import os


class LogType(Enum):
    Default = "default"
    SkipCase = "skip_case"
    EncodeFail = "encode_fail"


@lru_cache(typed=True)
def __parse_log_env_var(silencelog_raw):
    if silencelog_raw is None:
        return {k: False for k in LogType}
    silencelog = silencelog_raw.lower().split(",")
    for i, v in enumerate(silencelog):
        silencelog[i] = v.strip()
    retval = {k: True for k in LogType}
    if len(silencelog) > 1 and silencelog[-1] == "":
        # allow trailing comma
        silencelog.pop()
    if len(silencelog) == 1:
        if silencelog[0] in ("0", "false"):
            for k in LogType:
                retval[k] = False
            silencelog.pop()
        elif silencelog[0] in ("1", "true", ""):
            silencelog.pop()
    for v in silencelog:
        silenced = True
        if v.startswith("!"):
            v = v[1:]
            silenced = False
        matches = False
        for k in LogType:
            if fnmatchcase(k.value, v):
                matches = True
                retval[k] = silenced
        if not matches:
            raise ValueError(f"SILENCELOG: {v!r} did not match any known "
                             f"LogType: {' '.join(i.value for i in LogType)}")
    return retval


def log(*args, kind=LogType.Default, **kwargs):
    """verbose printing, can be disabled by setting env var "SILENCELOG".
    """
    silenced = __parse_log_env_var(os.environ.get("SILENCELOG"))
    if silenced[kind]:
        return
    print(*args, **kwargs)
